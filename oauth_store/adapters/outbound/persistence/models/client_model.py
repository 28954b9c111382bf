# oauth_store/adapters/outbound/persistence/models/client_model.py

"""
OAuth client model.

A client is an application registered to obtain tokens on behalf of
accounts. Pre-defined clients are provisioned from the configuration.
"""

from datetime import datetime

from sqlalchemy import Column, LargeBinary, String, Boolean, DateTime
from oauth_store.adapters.outbound.persistence.models.base_model import Base


class Client(Base):
    """
    Attributes:
        id: 8 byte client id
        secret: sha256 of the client secret
        name: Display name
        image_uri: Logo URL
        redirect_uri: Registered redirect URI
        whitelisted: Skips the permissions prompt
        can_grant: May request tokens directly
        trusted: First-party client
        created_at: Creation time
    """
    __tablename__ = "clients"

    id = Column(LargeBinary(8), primary_key=True)
    secret = Column(LargeBinary(32), nullable=True)
    name = Column(String(256), nullable=False)
    image_uri = Column(String(256), nullable=False, default="")
    redirect_uri = Column(String(256), nullable=False)
    whitelisted = Column(Boolean, nullable=False, default=False)
    can_grant = Column(Boolean, nullable=False, default=False)
    trusted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Client(id={self.id.hex() if self.id else None}, name={self.name})>"

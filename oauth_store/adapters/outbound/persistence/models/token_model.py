# oauth_store/adapters/outbound/persistence/models/token_model.py

"""
Access token model.

Only the sha256 of the token is stored; the plaintext is returned once, when
the token is generated.
"""

from datetime import datetime

from sqlalchemy import Column, LargeBinary, String, DateTime, ForeignKey
from oauth_store.adapters.outbound.persistence.models.base_model import Base


class Token(Base):
    """
    Attributes:
        token: sha256 of the access token
        client_id: Client the token was issued to
        uid: Account the token acts for
        scope: Space separated scopes
        created_at: Issue time
        expires_at: Expiration time, expired tokens are never returned
    """
    __tablename__ = "tokens"

    token = Column(LargeBinary(32), primary_key=True)
    client_id = Column(LargeBinary(8), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    uid = Column(LargeBinary(16), ForeignKey("accounts.uid", ondelete="CASCADE"), nullable=False, index=True)
    scope = Column(String(256), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)

# oauth_store/adapters/outbound/persistence/models/device_model.py

from datetime import datetime

from sqlalchemy import Column, LargeBinary, String, DateTime, ForeignKey
from oauth_store.adapters.outbound.persistence.models.base_model import Base


class Device(Base):
    """Device registered on a session token, at most one per session."""
    __tablename__ = "devices"

    id = Column(LargeBinary(16), primary_key=True)
    uid = Column(LargeBinary(16), ForeignKey("accounts.uid", ondelete="CASCADE"), nullable=False, index=True)
    session_token_id = Column(
        LargeBinary(32),
        ForeignKey("session_tokens.token_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    name = Column(String(255), nullable=True)
    type = Column(String(16), nullable=True)
    push_callback = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

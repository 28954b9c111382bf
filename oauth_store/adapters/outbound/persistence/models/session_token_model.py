# oauth_store/adapters/outbound/persistence/models/session_token_model.py

from datetime import datetime

from sqlalchemy import Column, LargeBinary, String, DateTime, ForeignKey
from oauth_store.adapters.outbound.persistence.models.base_model import Base


class SessionToken(Base):
    """Session of an account; a device may be registered on it."""
    __tablename__ = "session_tokens"

    token_id = Column(LargeBinary(32), primary_key=True)
    uid = Column(LargeBinary(16), ForeignKey("accounts.uid", ondelete="CASCADE"), nullable=False, index=True)
    user_agent = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

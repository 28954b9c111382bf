# oauth_store/adapters/outbound/persistence/models/account_model.py

from datetime import datetime

from sqlalchemy import Column, LargeBinary, String, Boolean, DateTime
from oauth_store.adapters.outbound.persistence.models.base_model import Base


class Account(Base):
    __tablename__ = "accounts"

    uid = Column(LargeBinary(16), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    locale = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Account(email={self.email})>"

"""
RefreshToken model: one row per issued refresh token so it can be revoked on logout.
Fields:
- token (unique) - the signed refresh token string
- user_id (String(36)) - FK to users.id
- expires_at - absolute expiry; a row past it is treated as gone
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base, as_utc


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(512), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def is_expired(self, now: datetime) -> bool:
        return as_utc(self.expires_at) <= now

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"

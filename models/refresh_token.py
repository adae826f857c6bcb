"""
RefreshToken model: stores issued refresh tokens so they can be revoked.
Fields:
- token (unique) - the signed token string as handed to the client
- user_id (String(36)) - FK to users.id
- expires_at - checked explicitly at refresh time, independent of the token's exp claim

A row exists only between login and logout (or expired-refresh detection).
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(512), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"

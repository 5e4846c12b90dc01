"""리프레시 토큰 모델 — 해시된 일회용 리프레시 토큰 저장.

Refresh Token model — Stores hashed, single-use refresh tokens.
The raw secret only ever lives in the client's cookie; the table keeps its
SHA-256 digest, the owner and the expiry.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_overflow.database import Base


class RefreshToken(Base):
    """리프레시 토큰 테이블.

    Refresh token table. A row is deleted the moment it is redeemed,
    found expired, or revoked by logout.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 소유 사용자 ID (Owner user id)
        token_hash: 원본 토큰의 SHA-256 해시 (SHA-256 hex digest of the raw token)
        expires_at: 만료 일시 (Expiration timestamp)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    # Relationships
    user = relationship("User", back_populates="refresh_tokens")

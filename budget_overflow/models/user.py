"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.

Tables:
    - users: 사용자 계정 (User accounts; email is unique case-insensitively)
"""

from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_overflow.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — Identity record for one budget owner.
    Emails are stored trimmed and lowercased; the functional unique index on
    lower(email) is the authoritative uniqueness guarantee.

    Attributes:
        id: 고유 식별자 (Integer primary key)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        email: 이메일 (Lowercased email, unique case-insensitively)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_tokens: 리프레시 토큰 목록 (Outstanding refresh tokens, cascade delete)
        categories: 사용자 정의 카테고리 (User-owned categories)
        transactions: 거래 내역 (Owned transactions)

    Constraints:
        uq_users_email_lower: 대소문자 무시 이메일 고유 (Case-insensitive unique email)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 이름 — First name (2~20자, letters/spaces/apostrophes/dots)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    # 성 — Last name
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    # 이메일 — Login email (소문자 정규화, normalized to lowercase)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


# 대소문자 무시 이메일 고유 인덱스 — Functional unique index on lower(email)
Index("uq_users_email_lower", func.lower(User.email), unique=True)

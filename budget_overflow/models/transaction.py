"""거래 ORM 모델 — 수입/지출 기록.

Transaction ORM model — One income or expense entry owned by a user.
"""

from datetime import date as date_type, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_overflow.database import Base

# 거래 유형 — Allowed transaction types
TRANSACTION_TYPES: tuple[str, ...] = ("income", "expense")


class Transaction(Base):
    """거래 모델.

    Transaction model. Amounts are always positive; the type decides the sign
    when aggregating.

    Attributes:
        id: 고유 식별자 (Integer primary key)
        user_id: 소유 사용자 ID (Owner user id)
        category_id: 카테고리 ID, 선택 (Optional category id, SET NULL on delete)
        title: 제목 (Short description)
        amount: 금액 > 0 (Positive amount, NUMERIC(14,2))
        type: 유형 (income | expense)
        date: 거래 날짜 (Calendar date)
        note: 메모 (Optional free-text note)
        created_at: 생성 일시 (Creation timestamp)
        updated_at: 수정 일시 (Last update timestamp)
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    type: Mapped[str] = mapped_column(Enum(*TRANSACTION_TYPES, name="txn_type"), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, default=date_type.today)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        Index("ix_transactions_user_date", "user_id", "date"),
        Index("ix_transactions_user_category", "user_id", "category_id"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")

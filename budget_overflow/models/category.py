"""카테고리 ORM 모델 — 전역 카테고리와 사용자 카테고리.

Category ORM model — Global categories (user_id IS NULL) shared by everyone,
plus categories created by individual users.
"""

from sqlalchemy import ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_overflow.database import Base


class Category(Base):
    """카테고리 모델.

    Category model. Global names are unique among globals; user-owned names
    are unique per user. Both rules are enforced with partial unique indexes.

    Attributes:
        id: 고유 식별자 (Integer primary key)
        user_id: 소유 사용자 ID, NULL이면 전역 (Owner user id, NULL = global)
        name: 카테고리 이름 (Display name)
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 소유 사용자 FK — NULL = 전역 카테고리 (NULL means global category)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        Index(
            "uq_categories_global_name",
            "name",
            unique=True,
            postgresql_where=text("user_id IS NULL"),
            sqlite_where=text("user_id IS NULL"),
        ),
        Index(
            "uq_categories_user_name",
            "user_id",
            "name",
            unique=True,
            postgresql_where=text("user_id IS NOT NULL"),
            sqlite_where=text("user_id IS NOT NULL"),
        ),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)

"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for create_all() and relationship
resolution.

Modules:
    user: 사용자 (Users / credential store)
    token: 리프레시 토큰 (Hashed single-use refresh tokens)
    category: 카테고리 (Global and user-owned categories)
    transaction: 거래 (Income/expense transactions)
"""

from budget_overflow.models.user import User
from budget_overflow.models.token import RefreshToken
from budget_overflow.models.category import Category
from budget_overflow.models.transaction import Transaction

__all__ = [
    "User",
    "RefreshToken",
    "Category",
    "Transaction",
]

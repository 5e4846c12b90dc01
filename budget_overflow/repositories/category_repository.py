"""카테고리 레포지토리 — 전역 + 사용자 카테고리 조회.

Category Repository — Queries over global categories (user_id IS NULL)
and the caller's own categories.
"""

from typing import Sequence

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.category import Category
from budget_overflow.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """카테고리 테이블 레포지토리 (Repository for the categories table)."""

    def __init__(self) -> None:
        super().__init__(Category)

    @staticmethod
    def _visible_to(user_id: int):
        # 전역 또는 본인 소유 — Global or owned by this user
        return or_(Category.user_id.is_(None), Category.user_id == user_id)

    async def list_visible(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> Sequence[Category]:
        """사용자가 볼 수 있는 카테고리 목록 — 전역 먼저, 이름순.

        List categories visible to the user: globals first, then the user's
        own, each group sorted by name.
        """
        query: Select = (
            select(Category)
            .where(self._visible_to(user_id))
            .order_by(case((Category.user_id.is_(None), 0), else_=1), Category.name.asc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_visible(
        self,
        db: AsyncSession,
        category_id: int,
        user_id: int,
    ) -> Category | None:
        """사용자가 접근 가능한 카테고리를 ID로 조회합니다.

        Return the category if it is global or owned by the user.
        """
        query: Select = select(Category).where(Category.id == category_id, self._visible_to(user_id))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_name(
        self,
        db: AsyncSession,
        name: str,
        user_id: int,
    ) -> Category | None:
        """전역 또는 본인 카테고리 중 이름이 같은 항목(대소문자 무시)을 찾습니다."""
        query: Select = (
            select(Category)
            .where(func.lower(Category.name) == name.lower(), self._visible_to(user_id))
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
category_repository: CategoryRepository = CategoryRepository()

"""카테고리 서비스 — 카테고리 조회 및 생성 비즈니스 로직.

Category Service — Lists global plus user-owned categories and creates
user categories with case-insensitive duplicate detection.
"""

from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.category import Category
from budget_overflow.repositories.category_repository import category_repository
from budget_overflow.schemas.category import CategoryCreate, CategoryResponse
from budget_overflow.utils.exceptions import DuplicateError


class CategoryService:
    """카테고리 비즈니스 로직 (Category business logic)."""

    async def list_categories(self, db: AsyncSession, user_id: int) -> list[CategoryResponse]:
        """전역 카테고리 먼저, 이후 사용자 카테고리 — 각각 이름순.

        List global categories first, then the user's own, each sorted by name.
        """
        categories: Sequence[Category] = await category_repository.list_visible(db, user_id)
        return [CategoryResponse.model_validate(c) for c in categories]

    async def create_category(
        self,
        db: AsyncSession,
        user_id: int,
        data: CategoryCreate,
    ) -> CategoryResponse:
        """사용자 카테고리를 생성합니다.

        Create a category owned by the user.

        Raises:
            DuplicateError: 같은 이름(대소문자 무시)의 전역/본인 카테고리가 있을 때
                            (A global or owned category with the same name exists)
        """
        if await category_repository.find_by_name(db, data.name, user_id) is not None:
            raise DuplicateError("Category already exists.")

        try:
            category: Category = await category_repository.create(
                db, {"user_id": user_id, "name": data.name}
            )
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Category already exists.")
        return CategoryResponse.model_validate(category)


# 싱글턴 인스턴스 — Singleton instance
category_service: CategoryService = CategoryService()

"""카테고리 라우터 — 카테고리 조회 및 생성.

Categories Router — List visible categories and create user categories.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.api.deps import CurrentUserId
from budget_overflow.database import get_db
from budget_overflow.schemas.category import (
    CategoryCreate,
    CategoryCreateResponse,
    CategoryListResponse,
    CategoryResponse,
)
from budget_overflow.services.category_service import category_service

router: APIRouter = APIRouter()


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryListResponse:
    """카테고리 목록 — 전역 먼저, 이후 사용자 카테고리 (Globals first, then the user's own)."""
    categories: list[CategoryResponse] = await category_service.list_categories(db, user_id)
    return CategoryListResponse(message="Categories fetched successfully", data=categories)


@router.post("", response_model=CategoryCreateResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryCreateResponse:
    """사용자 카테고리 생성 (Create a user-owned category)."""
    category: CategoryResponse = await category_service.create_category(db, user_id, data)
    await db.commit()
    return CategoryCreateResponse(message="Category created successfully.", data=category)

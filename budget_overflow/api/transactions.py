"""거래 라우터 — 거래 CRUD 및 요약.

Transactions Router — List, create, update and delete transactions, plus
the dashboard summary. Every route is scoped to the authenticated user.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.api.deps import CurrentUserId
from budget_overflow.database import get_db
from budget_overflow.schemas.summary import TransactionSummary
from budget_overflow.schemas.transaction import (
    TransactionCreate,
    TransactionCreateResponse,
    TransactionDeleteResponse,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from budget_overflow.services.summary_service import summary_service
from budget_overflow.services.transaction_service import parse_date_filter, transaction_service

router: APIRouter = APIRouter()


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
    date_from: Annotated[str | None, Query(alias="from")] = None,
    date_to: Annotated[str | None, Query(alias="to")] = None,
    category_id: Annotated[str | None, Query(alias="categoryId")] = None,
    txn_type: Annotated[str | None, Query(alias="type")] = None,
    page: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
) -> TransactionListResponse:
    """거래 목록 — 필터 및 페이지네이션, 날짜 내림차순.

    List transactions filtered by date range, category and type, newest first.
    """
    return await transaction_service.list_transactions(
        db,
        user_id,
        date_from=date_from,
        date_to=date_to,
        category_id=category_id,
        txn_type=txn_type,
        page=page,
        limit=limit,
    )


@router.get("/summary", response_model=TransactionSummary)
async def get_summary(
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
    date_from: Annotated[str | None, Query(alias="from")] = None,
    date_to: Annotated[str | None, Query(alias="to")] = None,
) -> TransactionSummary:
    """거래 요약 — 합계, 월별 추이, 카테고리별 합계 (Totals, monthly trend, per-category breakdown)."""
    parsed_from: date | None = parse_date_filter(date_from, "from")
    parsed_to: date | None = parse_date_filter(date_to, "to")
    return await summary_service.get_summary(db, user_id, parsed_from, parsed_to)


@router.post("", response_model=TransactionCreateResponse, status_code=201)
async def create_transaction(
    data: TransactionCreate,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TransactionCreateResponse:
    """거래 생성 (Create a transaction)."""
    transaction: TransactionResponse = await transaction_service.create_transaction(db, user_id, data)
    await db.commit()
    return TransactionCreateResponse(message="Transaction created successfully.", data=transaction)


@router.patch("/{transaction_id}", response_model=TransactionCreateResponse)
async def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TransactionCreateResponse:
    """거래 부분 수정 — categoryId: null이면 카테고리 해제 (Partial update; null categoryId clears it)."""
    transaction: TransactionResponse = await transaction_service.update_transaction(
        db, user_id, transaction_id, data
    )
    await db.commit()
    return TransactionCreateResponse(message="Transaction updated successfully.", data=transaction)


@router.delete("/{transaction_id}", response_model=TransactionDeleteResponse)
async def delete_transaction(
    transaction_id: int,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TransactionDeleteResponse:
    """거래 삭제 (Delete a transaction)."""
    deleted_id: int = await transaction_service.delete_transaction(db, user_id, transaction_id)
    await db.commit()
    return TransactionDeleteResponse(id=deleted_id)

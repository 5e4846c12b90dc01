"""거래 서비스 — 거래 CRUD 비즈니스 로직.

Transaction Service — Ownership-scoped create, list, update and delete.
A transaction may only reference a global category or one the caller owns.
"""

from datetime import date
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.transaction import TRANSACTION_TYPES, Transaction
from budget_overflow.repositories.category_repository import category_repository
from budget_overflow.repositories.transaction_repository import transaction_repository
from budget_overflow.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from budget_overflow.utils.exceptions import BadRequestError, NotFoundError
from budget_overflow.utils.pagination import PaginationMeta, clamp_page
from budget_overflow.utils.validators import parse_iso_date


def parse_date_filter(value: str | None, name: str) -> date | None:
    """쿼리 날짜 필터 파싱 (Parse an optional from/to query filter).

    Raises:
        BadRequestError: 형식이 잘못된 경우 (Invalid date)
    """
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise BadRequestError(f"Invalid '{name}' date.")


def parse_int_param(value: str | None, name: str) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise BadRequestError(f"Invalid '{name}'.")


class TransactionService:
    """거래 비즈니스 로직 (Transaction business logic)."""

    async def _ensure_category_accessible(
        self,
        db: AsyncSession,
        category_id: int,
        user_id: int,
    ) -> None:
        if await category_repository.get_visible(db, category_id, user_id) is None:
            raise BadRequestError("Category not found or not accessible.")

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        date_from: str | None = None,
        date_to: str | None = None,
        category_id: str | None = None,
        txn_type: str | None = None,
        page: str | None = None,
        limit: str | None = None,
    ) -> TransactionListResponse:
        """필터와 페이지네이션을 적용한 거래 목록.

        List the user's transactions. Raw query values are validated here so
        every bad filter reports a 400 with a specific message.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유 사용자 ID (Owner user id)
            date_from: 시작 날짜 문자열 (Inclusive lower date bound)
            date_to: 종료 날짜 문자열 (Inclusive upper date bound)
            category_id: 카테고리 ID 문자열 (Category filter)
            txn_type: 유형 필터 (income | expense)
            page: 페이지 번호 (Page number, default 1)
            limit: 페이지 크기 (Page size, default 20, capped at 100)

        Returns:
            TransactionListResponse: 거래 목록과 페이지 정보 (Items and pagination metadata)

        Raises:
            BadRequestError: 잘못된 필터 값 (Invalid filter value)
        """
        parsed_from: date | None = parse_date_filter(date_from, "from")
        parsed_to: date | None = parse_date_filter(date_to, "to")
        if txn_type and txn_type not in TRANSACTION_TYPES:
            raise BadRequestError("Invalid 'type'.")
        parsed_category: int | None = parse_int_param(category_id, "categoryId")
        page_num, limit_num = clamp_page(
            parse_int_param(page, "page"), parse_int_param(limit, "limit")
        )

        items, total = await transaction_repository.get_by_filters(
            db,
            user_id,
            date_from=parsed_from,
            date_to=parsed_to,
            category_id=parsed_category,
            txn_type=txn_type or None,
            page=page_num,
            per_page=limit_num,
        )
        return TransactionListResponse(
            data=[TransactionResponse.model_validate(t) for t in items],
            pagination=PaginationMeta.build(page_num, limit_num, total),
        )

    async def create_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        data: TransactionCreate,
    ) -> TransactionResponse:
        """거래를 생성합니다 (Create a transaction owned by the user).

        Raises:
            BadRequestError: 접근할 수 없는 카테고리 (Category is neither global nor owned)
        """
        await self._ensure_category_accessible(db, data.category_id, user_id)
        transaction: Transaction = await transaction_repository.create(
            db,
            {
                "user_id": user_id,
                "category_id": data.category_id,
                "title": data.title,
                "amount": data.amount,
                "type": data.type,
                "date": data.date,
                "note": data.note,
            },
        )
        return TransactionResponse.model_validate(transaction)

    async def update_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        transaction_id: int,
        data: TransactionUpdate,
    ) -> TransactionResponse:
        """거래를 부분 수정합니다.

        Apply a partial update. An explicit null categoryId clears the
        category.

        Raises:
            BadRequestError: 변경할 필드가 없거나 카테고리에 접근할 수 없을 때
                             (No fields given, or inaccessible category)
            NotFoundError: 거래가 없거나 본인 소유가 아닐 때 (Missing or not owned)
        """
        updates: dict[str, Any] = data.to_update_dict()
        if not updates:
            raise BadRequestError("No valid fields to update.")

        if updates.get("category_id") is not None:
            await self._ensure_category_accessible(db, updates["category_id"], user_id)

        transaction: Transaction | None = await transaction_repository.update(
            db, transaction_id, updates, user_id=user_id
        )
        if transaction is None:
            raise NotFoundError("Transaction not found.")
        return TransactionResponse.model_validate(transaction)

    async def delete_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        transaction_id: int,
    ) -> int:
        """거래를 삭제하고 ID를 반환합니다 (Delete and return the id).

        Raises:
            NotFoundError: 거래가 없거나 본인 소유가 아닐 때 (Missing or not owned)
        """
        if not await transaction_repository.delete(db, transaction_id, user_id=user_id):
            raise NotFoundError("Transaction not found.")
        return transaction_id


# 싱글턴 인스턴스 — Singleton instance
transaction_service: TransactionService = TransactionService()

"""거래 레포지토리 — 소유자 범위 거래 CRUD 및 필터 조회.

Transaction Repository — Owner-scoped transaction queries with date,
category and type filters, paginated and sorted by date descending.
"""

from datetime import date
from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.transaction import Transaction
from budget_overflow.repositories.base import BaseRepository
from budget_overflow.utils.pagination import paginate


class TransactionRepository(BaseRepository[Transaction]):
    """거래 테이블 레포지토리 (Repository for the transactions table)."""

    def __init__(self) -> None:
        super().__init__(Transaction)

    def _apply_filters(
        self,
        query: Select,
        user_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
        category_id: int | None = None,
        txn_type: str | None = None,
    ) -> Select:
        # 소유권 범위는 항상 적용 — Ownership scope is always applied
        query = query.where(Transaction.user_id == user_id)
        if date_from is not None:
            query = query.where(Transaction.date >= date_from)
        if date_to is not None:
            query = query.where(Transaction.date <= date_to)
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if txn_type is not None:
            query = query.where(Transaction.type == txn_type)
        return query

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
        category_id: int | None = None,
        txn_type: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Transaction], int]:
        """필터 조건으로 거래 목록을 페이지네이션하여 조회합니다.

        Retrieve the user's transactions matching the filters, newest date
        first, paginated.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유 사용자 ID (Owner user id)
            date_from: 시작 날짜, 포함 (Inclusive lower date bound)
            date_to: 종료 날짜, 포함 (Inclusive upper date bound)
            category_id: 카테고리 필터 (Category filter)
            txn_type: 유형 필터 (income | expense)
            page: 페이지 번호 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Transaction], int]: (거래 목록, 전체 개수) (Page items and total count)
        """
        query: Select = self._apply_filters(
            select(Transaction), user_id, date_from, date_to, category_id, txn_type
        ).order_by(Transaction.date.desc(), Transaction.id.desc())
        return await paginate(db, query, page, per_page)


# 싱글턴 인스턴스 — Singleton instance
transaction_repository: TransactionRepository = TransactionRepository()

"""요약 서비스 — 대시보드 집계 비즈니스 로직.

Summary Service — Aggregation for the dashboard: income/expense totals,
a monthly trend and a per-category breakdown over an optional date range.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.models.category import Category
from budget_overflow.models.transaction import Transaction
from budget_overflow.schemas.summary import CategorySummary, MonthlySummary, TransactionSummary

UNCATEGORIZED: str = "Uncategorized"


def _money(value: Decimal | float | int | None) -> float:
    return round(float(value or 0), 2)


class SummaryService:
    """거래 요약 서비스.

    Transaction aggregation service for dashboard views.
    """

    def _sums(self):
        income = func.sum(case((Transaction.type == "income", Transaction.amount), else_=0))
        expense = func.sum(case((Transaction.type == "expense", Transaction.amount), else_=0))
        return income.label("income"), expense.label("expense")

    def _scope(self, query: Select, user_id: int, date_from: date | None, date_to: date | None) -> Select:
        query = query.where(Transaction.user_id == user_id)
        if date_from is not None:
            query = query.where(Transaction.date >= date_from)
        if date_to is not None:
            query = query.where(Transaction.date <= date_to)
        return query

    async def get_summary(
        self,
        db: AsyncSession,
        user_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> TransactionSummary:
        """요약 집계.

        Aggregate the user's transactions.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유 사용자 ID (Owner user id)
            date_from: 시작 날짜, 포함 (Inclusive lower bound, optional)
            date_to: 종료 날짜, 포함 (Inclusive upper bound, optional)

        Returns:
            TransactionSummary: 합계, 월별 추이, 카테고리별 합계
                (Totals, monthly trend oldest first, per-category breakdown by name)
        """
        income_col, expense_col = self._sums()

        # 전체 합계 — Totals
        totals = (await db.execute(self._scope(select(income_col, expense_col), user_id, date_from, date_to))).one()
        income: float = _money(totals.income)
        expense: float = _money(totals.expense)

        # 월별 추이 — 날짜별 합계를 월 단위로 묶음 (Per-day sums rolled up by YYYY-MM)
        daily_query: Select = self._scope(
            select(Transaction.date, income_col, expense_col), user_id, date_from, date_to
        ).group_by(Transaction.date).order_by(Transaction.date.asc())
        months: "OrderedDict[str, list[float]]" = OrderedDict()
        for row in (await db.execute(daily_query)).all():
            bucket = months.setdefault(row.date.strftime("%Y-%m"), [0.0, 0.0])
            bucket[0] += float(row.income or 0)
            bucket[1] += float(row.expense or 0)
        monthly: list[MonthlySummary] = [
            MonthlySummary(
                month=month,
                income=round(inc, 2),
                expense=round(exp, 2),
                net=round(inc - exp, 2),
            )
            for month, (inc, exp) in months.items()
        ]

        # 카테고리별 합계 — Per-category totals (uncategorized rows grouped together)
        category_query: Select = (
            self._scope(
                select(Transaction.category_id, Category.name, income_col, expense_col)
                .outerjoin(Category, Category.id == Transaction.category_id),
                user_id,
                date_from,
                date_to,
            )
            .group_by(Transaction.category_id, Category.name)
        )
        by_category: list[CategorySummary] = sorted(
            (
                CategorySummary(
                    category_id=row.category_id,
                    name=row.name or UNCATEGORIZED,
                    income=_money(row.income),
                    expense=_money(row.expense),
                )
                for row in (await db.execute(category_query)).all()
            ),
            key=lambda item: item.name.lower(),
        )

        return TransactionSummary(
            income=income,
            expense=expense,
            balance=round(income - expense, 2),
            monthly=monthly,
            by_category=by_category,
        )


# 싱글턴 인스턴스 — Singleton instance
summary_service: SummaryService = SummaryService()

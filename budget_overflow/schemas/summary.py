"""거래 요약 스키마 — 대시보드 집계 응답.

Transaction summary schemas for the dashboard aggregation endpoint.
"""

from budget_overflow.schemas.common import CamelModel


class MonthlySummary(CamelModel):
    """월별 합계 (Per-month totals, month formatted as YYYY-MM)."""

    month: str
    income: float
    expense: float
    net: float


class CategorySummary(CamelModel):
    """카테고리별 합계 — 카테고리 없는 거래는 category_id=None, name="Uncategorized"."""

    category_id: int | None = None
    name: str
    income: float
    expense: float


class TransactionSummary(CamelModel):
    """전체 요약 응답 (Totals, monthly trend and per-category breakdown)."""

    income: float
    expense: float
    balance: float
    monthly: list[MonthlySummary]
    by_category: list[CategorySummary]

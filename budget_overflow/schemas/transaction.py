"""거래 Pydantic 요청/응답 스키마 정의.

Transaction request/response schema definitions.
Amounts arrive as JSON numbers or numeric strings and are held as Decimal;
dates arrive as "YYYY-MM-DD" or a full ISO timestamp.
"""

from datetime import date as date_type, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import field_validator, model_validator

from budget_overflow.models.transaction import TRANSACTION_TYPES
from budget_overflow.schemas.common import CamelModel
from budget_overflow.utils.pagination import PaginationMeta
from budget_overflow.utils.validators import parse_iso_date


def coerce_amount(value: Any) -> Decimal:
    """금액을 양수 Decimal로 변환합니다 (Coerce a number or numeric string to a positive Decimal).

    Raises:
        ValueError: 숫자가 아니거나 0 이하인 경우 (Not numeric or not positive)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError("Amount must be > 0.")
    if isinstance(value, str) and not value.strip():
        raise ValueError("Amount must be > 0.")
    try:
        amount: Decimal = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError("Amount must be > 0.") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValueError("Amount must be > 0.")
    return amount


def coerce_date(value: Any) -> date_type:
    if isinstance(value, date_type):
        return value
    if not isinstance(value, str):
        raise ValueError("Invalid date.")
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValueError("Invalid date.") from exc


def coerce_category_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Valid categoryId required.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError("Valid categoryId required.")


def clean_note(value: Any) -> str | None:
    # 빈 메모는 NULL로 저장 — Blank notes are stored as NULL
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Note must be a string.")
    return value.strip() or None


class TransactionCreate(CamelModel):
    """거래 생성 요청 스키마.

    Transaction creation request schema.

    Attributes:
        title: 제목 (Required, trimmed)
        amount: 금액 (Strictly positive)
        type: 유형 (income | expense)
        date: 거래 날짜 (ISO date)
        category_id: 카테고리 ID (Must be global or owned by the caller)
        note: 메모 (Optional note)
    """

    title: str
    amount: Decimal
    type: str
    date: date_type
    category_id: int
    note: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title is required.")
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, value: Any) -> Decimal:
        return coerce_amount(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> str:
        if value not in TRANSACTION_TYPES:
            raise ValueError("Type must be 'income' or 'expense'.")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value: Any) -> date_type:
        return coerce_date(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def validate_category_id(cls, value: Any) -> int:
        return coerce_category_id(value)

    @field_validator("note", mode="before")
    @classmethod
    def validate_note(cls, value: Any) -> str | None:
        return clean_note(value)

    @model_validator(mode="before")
    @classmethod
    def require_fields(cls, data: object) -> object:
        # 필드 누락 시 원래 규칙 메시지 사용 — Missing fields report the same messages as invalid ones
        if isinstance(data, dict):
            if data.get("title") is None:
                raise ValueError("Title is required.")
            if data.get("amount") is None:
                raise ValueError("Amount must be > 0.")
            if data.get("type") is None:
                raise ValueError("Type must be 'income' or 'expense'.")
            if data.get("date") is None:
                raise ValueError("Invalid date.")
            if data.get("categoryId", data.get("category_id")) is None:
                raise ValueError("Valid categoryId required.")
        return data


class TransactionUpdate(CamelModel):
    """거래 부분 수정 요청 스키마.

    Partial update schema. Only fields present in the request body are
    applied; an explicit "categoryId": null clears the category.
    """

    title: str | None = None
    amount: Decimal | None = None
    type: str | None = None
    date: date_type | None = None
    category_id: int | None = None
    note: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title cannot be empty.")
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, value: Any) -> Decimal:
        return coerce_amount(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> str:
        cleaned = value.strip().lower() if isinstance(value, str) else value
        if cleaned not in TRANSACTION_TYPES:
            raise ValueError("Invalid type.")
        return cleaned

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value: Any) -> date_type:
        return coerce_date(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def validate_category_id(cls, value: Any) -> int | None:
        if value is None:
            return None
        return coerce_category_id(value)

    @field_validator("note", mode="before")
    @classmethod
    def validate_note(cls, value: Any) -> str | None:
        return clean_note(value)

    def to_update_dict(self) -> dict[str, Any]:
        """요청에 포함된 필드만 반환합니다 (Only the fields present in the request body)."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TransactionResponse(CamelModel):
    """거래 응답 스키마.

    Transaction as returned to the client; the amount is a JSON number.
    """

    id: int
    title: str
    amount: float
    type: str
    date: date_type
    note: str | None = None
    category_id: int | None = None
    created_at: datetime

    @field_validator("amount", mode="before")
    @classmethod
    def amount_to_float(cls, value: Any) -> float:
        return float(value)


class TransactionCreateResponse(CamelModel):
    message: str
    data: TransactionResponse


class TransactionListResponse(CamelModel):
    """거래 목록 응답 스키마 (Paginated transaction list)."""

    data: list[TransactionResponse]
    pagination: PaginationMeta


class TransactionDeleteResponse(CamelModel):
    id: int

"""카테고리 Pydantic 요청/응답 스키마 정의.

Category request/response schema definitions.
"""

from pydantic import field_validator, model_validator

from budget_overflow.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    """카테고리 생성 요청 스키마.

    Category creation request schema. The name is trimmed and may not be blank.

    Attributes:
        name: 카테고리 이름 (Category display name, max 100 chars)
    """

    name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_name(cls, data: object) -> object:
        if isinstance(data, dict):
            name = data.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ValueError("Name is required.")
        return data

    @field_validator("name")
    @classmethod
    def clean_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if len(value) > 100:
            raise ValueError("Name must be at most 100 characters.")
        return value


class CategoryResponse(CamelModel):
    """카테고리 응답 스키마.

    Attributes:
        id: 카테고리 ID (Category id)
        name: 카테고리 이름 (Display name)
        user_id: 소유자 ID, 전역이면 None (Owner id, None for global categories)
    """

    id: int
    name: str
    user_id: int | None = None


class CategoryListResponse(CamelModel):
    message: str
    data: list[CategoryResponse]


class CategoryCreateResponse(CamelModel):
    message: str
    data: CategoryResponse

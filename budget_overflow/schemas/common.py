"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions.
Every schema exchanged with the client serializes with camelCase keys
(firstName, categoryId, createdAt) while Python code keeps snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭 베이스 모델.

    Base model with camelCase aliases. Accepts both alias and field name on
    input and reads ORM objects through from_attributes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마.

    Simple message response schema for operations without a data payload.

    Attributes:
        message: 결과 메시지 (Result message)
    """

    message: str

"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token refresh, password change, profile
update and current user info. Input rules run here, before any database
access; a failing rule surfaces as a 400 with its message.
"""

from datetime import datetime

from pydantic import ValidationInfo, field_validator, model_validator

from budget_overflow.schemas.common import CamelModel
from budget_overflow.utils.validators import (
    is_strong_password,
    is_valid_email,
    is_valid_name,
    normalize_email,
)

PASSWORD_POLICY_MESSAGE: str = (
    "Password must be between 8-20 characters and include uppercase, "
    "lowercase, number, and special character."
)


def _strip(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(CamelModel):
    """회원가입 요청 스키마.

    Registration request schema. Names are trimmed, the email is trimmed and
    lowercased, and the password must satisfy the strength policy.

    Attributes:
        first_name: 이름 (First name, 2-20 letters/spaces/apostrophes/dots)
        last_name: 성 (Last name, same rules)
        email: 이메일 (Email address, normalized to lowercase)
        password: 비밀번호 (Plain text password, bcrypt-hashed on server)
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_all_fields(cls, data: object) -> object:
        # 필수 필드 누락 검사 — Missing or blank required fields
        if isinstance(data, dict):
            keys = (("firstName", "first_name"), ("lastName", "last_name"), ("email", "email"), ("password", "password"))
            for alias, name in keys:
                value = data.get(alias, data.get(name))
                if not isinstance(value, str) or not value.strip():
                    raise ValueError("First name, last name, email and password are required!")
        return data

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value: str | None, info: ValidationInfo) -> str | None:
        value = _strip(value)
        if value is not None and not is_valid_name(value):
            label: str = "First name" if info.field_name == "first_name" else "Last name"
            raise ValueError(f"{label} is invalid! Must be at least 2 characters long and has no symbols!")
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = normalize_email(value)
        if not is_valid_email(value):
            raise ValueError("Email format is invalid!")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        if value is not None and not is_strong_password(value):
            raise ValueError(PASSWORD_POLICY_MESSAGE)
        return value


class LoginRequest(CamelModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        email: 이메일 (Email address, normalized to lowercase)
        password: 비밀번호 (Plain text, compared to bcrypt hash)
    """

    email: str | None = None
    password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_credentials(cls, data: object) -> object:
        if isinstance(data, dict):
            email = data.get("email")
            password = data.get("password")
            if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
                raise ValueError("Email and password are required!")
        return data

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = normalize_email(value)
        if not is_valid_email(value):
            raise ValueError("Email format is invalid!")
        return value


class ChangePasswordRequest(CamelModel):
    """비밀번호 변경 요청 스키마.

    Password change request schema.

    Attributes:
        current_password: 현재 비밀번호 (Current password)
        new_password: 새 비밀번호 (New password, must satisfy the strength policy)
    """

    current_password: str | None = None
    new_password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_both(cls, data: object) -> object:
        if isinstance(data, dict):
            current = data.get("currentPassword", data.get("current_password"))
            new = data.get("newPassword", data.get("new_password"))
            if not isinstance(current, str) or not current or not isinstance(new, str) or not new:
                raise ValueError("Current and new passwords are required.")
        return data

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str | None) -> str | None:
        if value is not None and not is_strong_password(value):
            raise ValueError("New password is not strong enough.")
        return value


class ProfileUpdateRequest(CamelModel):
    """프로필 수정 요청 스키마.

    Profile update request schema. Both names are required and follow the
    registration rules.
    """

    first_name: str | None = None
    last_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_names(cls, data: object) -> object:
        if isinstance(data, dict):
            first = data.get("firstName", data.get("first_name"))
            last = data.get("lastName", data.get("last_name"))
            if not isinstance(first, str) or not first.strip() or not isinstance(last, str) or not last.strip():
                raise ValueError("First and last name are required.")
        return data

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value: str | None, info: ValidationInfo) -> str | None:
        value = _strip(value)
        if value is not None and not is_valid_name(value):
            label: str = "first name" if info.field_name == "first_name" else "last name"
            raise ValueError(f"Invalid {label}.")
        return value


class UserResponse(CamelModel):
    """사용자 정보 응답 스키마 (GET /me, 회원가입, 프로필 수정).

    Public user representation; never includes password fields.

    Attributes:
        id: 사용자 ID (User id)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        email: 이메일 (Normalized email)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: int
    first_name: str
    last_name: str
    email: str
    created_at: datetime


class RegisterResponse(CamelModel):
    """회원가입 응답 스키마 (Registration response: message + created user)."""

    message: str
    user: UserResponse


class AccessTokenResponse(CamelModel):
    """토큰 갱신 응답 스키마 — 새 액세스 토큰 (Refresh response carrying the new access token)."""

    access_token: str

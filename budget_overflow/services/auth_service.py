"""인증 서비스 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필 비즈니스 로직.

Auth Service — Session lifecycle business logic.

Two mechanisms make up a session:
- a stateless access token (signed JWT, 15 minutes, never looked up);
- a stateful refresh token (random secret, stored hashed, 7 days) that is
  single-use: redeeming it deletes its row before a replacement is issued.

The service never touches cookies; routers deliver the returned tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.config import Settings
from budget_overflow.models.token import RefreshToken
from budget_overflow.models.user import User
from budget_overflow.repositories.auth_repository import auth_repository
from budget_overflow.repositories.user_repository import user_repository
from budget_overflow.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from budget_overflow.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from budget_overflow.utils.jwt import TokenIssuer
from budget_overflow.utils.logger import get_logger
from budget_overflow.utils.password import PasswordHasher
from budget_overflow.utils.refresh_token import generate_raw_refresh_token, hash_refresh_token

logger = get_logger("auth")

INVALID_CREDENTIALS: str = "Invalid email or password."
INVALID_REFRESH: str = "Invalid refresh token. Please log in again."


class SessionTokens(NamedTuple):
    """새 세션 토큰 쌍 (Freshly minted access token and raw refresh token)."""

    access_token: str
    refresh_token: str


def _as_utc(value: datetime) -> datetime:
    # 일부 드라이버는 naive datetime 반환 — Some drivers return naive datetimes (stored as UTC)
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling the session lifecycle: registration, login, refresh
    rotation, logout, password change and profile update.

    Attributes:
        settings: 애플리케이션 설정 (Application settings)
        issuer: 액세스 토큰 발급기 (Access token issuer)
        hasher: 비밀번호 해셔 (Password hasher)
    """

    def __init__(self, settings: Settings, issuer: TokenIssuer, hasher: PasswordHasher) -> None:
        self.settings: Settings = settings
        self.issuer: TokenIssuer = issuer
        self.hasher: PasswordHasher = hasher

    async def _issue_session(self, db: AsyncSession, user_id: int) -> SessionTokens:
        """액세스 토큰과 리프레시 토큰을 생성하고 리프레시 해시를 저장합니다.

        Mint an access token and a raw refresh token, persisting only the
        refresh token's hash, owner and expiry.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 세션 소유자 ID (Session owner id)

        Returns:
            SessionTokens: 원본 토큰 쌍 (Raw token pair for cookie delivery)
        """
        raw_refresh: str = generate_raw_refresh_token()
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=self.settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user_id, token_hash=hash_refresh_token(raw_refresh), expires_at=expires_at
        )
        return SessionTokens(
            access_token=self.issuer.create_access_token(user_id),
            refresh_token=raw_refresh,
        )

    async def register(self, db: AsyncSession, data: RegisterRequest) -> UserResponse:
        """새 사용자를 등록합니다.

        Register a new user. The email pre-check is advisory; the unique
        index on lower(email) decides concurrent duplicates, and its
        violation is reported as the same conflict.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 검증된 회원가입 데이터 (Validated registration data)

        Returns:
            UserResponse: 생성된 사용자 (Created user without password fields)

        Raises:
            DuplicateError: 이메일 중복 시 (Email already registered)
        """
        if await user_repository.email_exists(db, data.email):
            raise DuplicateError("Email already exists!")

        password_hash: str = await self.hasher.hash_password_async(data.password)
        try:
            user: User = await user_repository.create(
                db,
                {
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                    "email": data.email,
                    "password_hash": password_hash,
                },
            )
        except IntegrityError:
            # 동시 가입 경쟁 — Concurrent registration lost the race on the unique index
            await db.rollback()
            raise DuplicateError("Email already exists!")

        logger.info("User registered", extra={"event": "register", "user_id": user.id})
        return UserResponse.model_validate(user)

    async def login(self, db: AsyncSession, data: LoginRequest) -> SessionTokens:
        """이메일/비밀번호 로그인을 처리합니다.

        Authenticate with email and password. Exactly one bcrypt comparison
        runs whether or not the user exists, and both failure causes produce
        the same error.

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        matched: bool = await self.hasher.verify_password_async(
            data.password, user.password_hash if user is not None else None
        )
        if user is None or not matched:
            logger.info("Login failed", extra={"event": "login_failed"})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        tokens: SessionTokens = await self._issue_session(db, user.id)
        logger.info("Login succeeded", extra={"event": "login", "user_id": user.id})
        return tokens

    async def refresh_session(self, db: AsyncSession, raw_token: str | None) -> SessionTokens:
        """리프레시 토큰을 회전시킵니다.

        Rotate a refresh token. The presented token's row is deleted before
        the replacement is inserted; only the caller whose DELETE removed the
        row may continue, so a token is redeemable exactly once. A crash
        between delete and insert leaves the user logged out.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            raw_token: 쿠키의 원본 리프레시 토큰 (Raw refresh token from the cookie)

        Returns:
            SessionTokens: 새 토큰 쌍 (New token pair)

        Raises:
            ForbiddenError: 누락, 미존재, 재사용 또는 만료된 토큰 (Missing, unknown, reused or expired token)
        """
        if not raw_token:
            raise ForbiddenError("Missing refresh token.")

        token_hash: str = hash_refresh_token(raw_token)
        record: RefreshToken | None = await auth_repository.get_by_hash(db, token_hash)
        if record is None:
            logger.warning("Unknown or reused refresh token", extra={"event": "refresh_rejected"})
            raise ForbiddenError(INVALID_REFRESH)

        user_id: int = record.user_id
        if _as_utc(record.expires_at) <= datetime.now(timezone.utc):
            # 만료 행 삭제는 오류 응답과 무관하게 확정 — The expired row is removed even though the request fails
            await auth_repository.delete_by_hash(db, token_hash)
            await db.commit()
            logger.info("Expired refresh token removed", extra={"event": "refresh_expired", "user_id": user_id})
            raise ForbiddenError("Refresh token expired. Please log in again.")

        if not await auth_repository.delete_by_hash(db, token_hash):
            logger.warning("Concurrent refresh lost", extra={"event": "refresh_rejected", "user_id": user_id})
            raise ForbiddenError(INVALID_REFRESH)

        tokens: SessionTokens = await self._issue_session(db, user_id)
        logger.info("Refresh token rotated", extra={"event": "refresh", "user_id": user_id})
        return tokens

    async def logout(self, db: AsyncSession, raw_token: str | None) -> None:
        """로그아웃 — 리프레시 토큰 폐기 (없어도 성공).

        Revoke the presented refresh token if there is one. Idempotent.
        """
        if raw_token:
            await auth_repository.delete_by_hash(db, hash_refresh_token(raw_token))
        logger.info("Logged out", extra={"event": "logout"})

    async def get_me(self, db: AsyncSession, user_id: int) -> UserResponse:
        """현재 사용자 정보를 조회합니다.

        Raises:
            NotFoundError: 토큰은 유효하지만 사용자 행이 삭제된 경우 (User row no longer exists)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return UserResponse.model_validate(user)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: int,
        data: ChangePasswordRequest,
    ) -> None:
        """비밀번호를 변경합니다.

        Change the user's password. The stored hash is untouched unless the
        current password matches and the new one differs from it. Existing
        refresh tokens stay valid.

        Raises:
            NotFoundError: 사용자가 없을 때 (User not found)
            ForbiddenError: 현재 비밀번호 불일치 (Wrong current password)
            BadRequestError: 새 비밀번호가 현재와 같을 때 (New password equals current)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found.")

        if not await self.hasher.verify_password_async(data.current_password, user.password_hash):
            raise ForbiddenError("Current password is incorrect.")

        if data.new_password == data.current_password:
            raise BadRequestError("New password must be different from the current password.")

        new_hash: str = await self.hasher.hash_password_async(data.new_password)
        await user_repository.update_password_hash(db, user, new_hash)
        logger.info("Password changed", extra={"event": "change_password", "user_id": user_id})

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: int,
        data: ProfileUpdateRequest,
    ) -> UserResponse:
        """이름을 수정합니다 (Update first and last name)."""
        user: User | None = await user_repository.update(
            db, user_id, {"first_name": data.first_name, "last_name": data.last_name}
        )
        if user is None:
            raise NotFoundError("User not found.")
        return UserResponse.model_validate(user)

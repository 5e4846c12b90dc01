"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필.

Auth Router — Registration, login, refresh rotation, logout, current user,
profile update and password change. Tokens travel in HTTP-only cookies;
the refresh response also returns the new access token in its body.
"""

from typing import Annotated, Any, Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from budget_overflow.api.deps import (
    CurrentUserId,
    get_auth_service,
    get_rate_guard,
    get_settings_dep,
    rate_limit,
    require_allowed_origin,
)
from budget_overflow.config import Settings
from budget_overflow.database import get_db
from budget_overflow.middleware.rate_limit import (
    LOGIN_EMAIL_FAILURES,
    LOGIN_IP,
    REFRESH_IP,
    REGISTER_EMAIL_FAILURES,
    REGISTER_IP,
    AuthRateGuard,
    client_ip,
)
from budget_overflow.schemas.auth import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from budget_overflow.schemas.common import MessageResponse
from budget_overflow.services.auth_service import AuthService, SessionTokens
from budget_overflow.utils.cookies import (
    clear_refresh_cookie,
    clear_session_cookies,
    set_session_cookies,
)
from budget_overflow.utils.exceptions import ForbiddenError
from budget_overflow.utils.validators import normalize_email

router: APIRouter = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    dependencies=[Depends(rate_limit(REGISTER_IP))],
)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    guard: Annotated[AuthRateGuard, Depends(get_rate_guard)],
) -> RegisterResponse:
    """회원가입 — 새 사용자 생성.

    Register a new user. Failed attempts count against a per-email budget.
    """
    key: str = guard.failure_key(data.email, client_ip(request))
    await guard.check(REGISTER_EMAIL_FAILURES, key)
    try:
        user: UserResponse = await auth_service.register(db, data)
    except HTTPException:
        await guard.record_failure(REGISTER_EMAIL_FAILURES, key)
        raise
    await db.commit()
    return RegisterResponse(message="New user has been registered!", user=user)


@router.post(
    "/login",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit(LOGIN_IP))],
)
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    guard: Annotated[AuthRateGuard, Depends(get_rate_guard)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> MessageResponse:
    """로그인 — 세션 쿠키 발급.

    Log in and receive the access and refresh cookies. Only failed attempts
    count against the per-email budget.
    """
    key: str = guard.failure_key(data.email, client_ip(request))
    await guard.check(LOGIN_EMAIL_FAILURES, key)
    try:
        tokens: SessionTokens = await auth_service.login(db, data)
    except HTTPException:
        await guard.record_failure(LOGIN_EMAIL_FAILURES, key)
        raise
    await db.commit()
    set_session_cookies(response, settings, tokens.access_token, tokens.refresh_token)
    return MessageResponse(message="Login successful")


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    dependencies=[Depends(require_allowed_origin), Depends(rate_limit(REFRESH_IP))],
)
async def refresh(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
):
    """토큰 갱신 — 리프레시 토큰 회전.

    Redeem the refresh cookie for a new session. Any rejection clears the
    refresh cookie so the client stops presenting it.
    """
    try:
        tokens: SessionTokens = await auth_service.refresh_session(
            db, request.cookies.get(settings.REFRESH_COOKIE_NAME)
        )
    except ForbiddenError as exc:
        # 오류 응답에도 쿠키 삭제 헤더 포함 — The error response must carry the cookie deletion
        rejected = JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
        clear_refresh_cookie(rejected, settings)
        return rejected

    await db.commit()
    set_session_cookies(response, settings, tokens.access_token, tokens.refresh_token)
    return AccessTokenResponse(access_token=tokens.access_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    dependencies=[Depends(require_allowed_origin)],
)
async def logout(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> MessageResponse:
    """로그아웃 — 리프레시 토큰 폐기 및 쿠키 삭제.

    Revoke the refresh token if one was sent and clear both cookies.
    """
    await auth_service.logout(db, request.cookies.get(settings.REFRESH_COOKIE_NAME))
    await db.commit()
    clear_session_cookies(response, settings)
    return MessageResponse(message="Logged out.")


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """현재 사용자 프로필 조회 (Current user profile)."""
    return await auth_service.get_me(db, user_id)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdateRequest,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """프로필 수정 — 이름 변경 (Update first and last name)."""
    user: UserResponse = await auth_service.update_profile(db, user_id, data)
    await db.commit()
    return user


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    user_id: CurrentUserId,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """비밀번호 변경 (Change the current user's password)."""
    await auth_service.change_password(db, user_id, data)
    await db.commit()
    return MessageResponse(message="Password changed successfully.")


# 본문 검증 실패도 이메일 실패 예산에 포함 — Rejected bodies count against the same budgets
FAILURE_BUDGETS: dict[Callable[..., Any], str] = {
    register: REGISTER_EMAIL_FAILURES,
    login: LOGIN_EMAIL_FAILURES,
}


async def record_rejected_body(request: Request, body: Any) -> None:
    """검증에 실패한 회원가입/로그인 요청을 실패로 기록합니다.

    Count a register or login request whose body failed validation as a
    failed attempt, keyed by the submitted email when one is present.

    Raises:
        TooManyRequestsError: 예산이 이미 소진된 경우 (Budget already exhausted)
    """
    budget: str | None = FAILURE_BUDGETS.get(request.scope.get("endpoint"))
    if budget is None:
        return
    email: Any = body.get("email") if isinstance(body, dict) else None
    guard: AuthRateGuard = request.app.state.rate_guard
    key: str = guard.failure_key(
        normalize_email(email) if isinstance(email, str) else None,
        client_ip(request),
    )
    await guard.check(budget, key)
    await guard.record_failure(budget, key)

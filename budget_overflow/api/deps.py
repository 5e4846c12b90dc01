"""FastAPI 의존성 주입 모듈 — 인증, 출처 검사, 요청 제한.

FastAPI dependency injection module — Authentication, origin checks and
rate-limit guards. Every collaborator (settings, token issuer, auth
service, rate guard) is read from app.state, where create_app() put it.

Authentication Flow:
    1. Authorization: Bearer <token> 헤더에서 토큰 추출, 없으면 accessToken 쿠키
       (Token from the Authorization header, else from the accessToken cookie)
    2. 토큰이 없으면 401 Unauthorized (No token → 401)
    3. 서명/만료/발급자/대상 검증 실패 시 403 Forbidden
       (Bad signature, expiry, issuer or audience → 403)
    4. DB 조회 없이 사용자 ID 반환 (Returns the user id with no DB lookup)
"""

from typing import Annotated, Awaitable, Callable

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from budget_overflow.config import Settings
from budget_overflow.middleware.rate_limit import AuthRateGuard, client_ip
from budget_overflow.services.auth_service import AuthService
from budget_overflow.utils.exceptions import ForbiddenError, UnauthorizedError
from budget_overflow.utils.jwt import TokenIssuer

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 None을 반환하여 쿠키로 대체
# (Extracts the bearer token; returns None when absent so the cookie can be used)
security: HTTPBearer = HTTPBearer(auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_rate_guard(request: Request) -> AuthRateGuard:
    return request.app.state.rate_guard


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> int:
    """액세스 토큰에서 현재 사용자 ID를 추출합니다.

    Authenticate the request from its access token. The Authorization
    header takes precedence over the access cookie.

    Args:
        request: 현재 요청 (Current request, for the cookie fallback)
        credentials: Bearer 자격 증명 (Bearer credentials, None if absent)
        settings: 애플리케이션 설정 (Application settings)
        issuer: 토큰 검증기 (Token issuer used for verification)

    Returns:
        int: 인증된 사용자 ID (Authenticated user id)

    Raises:
        UnauthorizedError: 토큰 없음 (No credential, 401)
        ForbiddenError: 토큰 검증 실패 (Invalid or expired token, 403)
    """
    token: str | None = credentials.credentials if credentials is not None else None
    if not token:
        token = request.cookies.get(settings.ACCESS_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Unauthorized")

    try:
        return issuer.user_id_from_token(token)
    except jwt.InvalidTokenError:
        raise ForbiddenError("Invalid token")


async def require_allowed_origin(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> None:
    """요청 출처 검사 — 리프레시/로그아웃 CSRF 방어.

    Reject requests whose Origin (or, failing that, Referer) header is
    present and does not start with the configured client origin.

    Raises:
        ForbiddenError: 허용되지 않은 출처 (Foreign origin)
    """
    allowed: str = settings.CORS_ORIGIN
    origin: str = request.headers.get("origin") or request.headers.get("referer") or ""
    if allowed and origin and not origin.startswith(allowed):
        raise ForbiddenError("Forbidden origin")


def rate_limit(budget: str) -> Callable[[Request], Awaitable[None]]:
    """요청 IP 기준 예산 차감 의존성을 생성합니다.

    Build a dependency that counts the request against an IP budget.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limit(LOGIN_IP))])
    """

    async def dependency(request: Request) -> None:
        guard: AuthRateGuard = request.app.state.rate_guard
        await guard.consume(budget, client_ip(request))

    return dependency


CurrentUserId = Annotated[int, Depends(get_current_user_id)]

"""세션 쿠키 설정/삭제 헬퍼.

Session cookie helpers. Both cookies are HTTP-only, Secure and
SameSite=None so a separately hosted client can send them cross-site.
The access cookie covers every path; the refresh cookie is scoped to the
refresh endpoint only.
"""

from starlette.responses import Response

from budget_overflow.config import Settings


def set_access_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.ACCESS_COOKIE_NAME,
        value=token,
        max_age=settings.access_token_max_age,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def set_refresh_cookie(response: Response, settings: Settings, raw_token: str) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=raw_token,
        max_age=settings.refresh_token_max_age,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def set_session_cookies(response: Response, settings: Settings, access_token: str, raw_refresh: str) -> None:
    """액세스/리프레시 쿠키를 함께 설정합니다 (Set both session cookies)."""
    set_access_cookie(response, settings, access_token)
    set_refresh_cookie(response, settings, raw_refresh)


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    # 삭제 시 path가 설정 시와 같아야 브라우저가 지움 (Path must match the one used when setting)
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    """두 세션 쿠키를 모두 삭제합니다 (Clear both session cookies)."""
    clear_refresh_cookie(response, settings)
    response.delete_cookie(
        key=settings.ACCESS_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )

"""요청 제한 — 전역 IP 한도(slowapi)와 인증 엔드포인트 한도(limits).

Rate limiting for API protection.

- A global per-IP budget applied to every route through slowapi's
  Limiter and SlowAPIMiddleware.
- Per-route IP budgets on register, login and refresh, and per-email
  failure budgets on register and login, built directly on the limits
  library that slowapi runs on. Failure budgets are only hit when the
  guarded operation fails, so successful repeat logins are never punished.

All counters live in the storage named by RATE_LIMIT_STORAGE_URI
(memory:// by default, redis:// for multi-instance deployments).
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import RateLimitItem, parse
from limits.aio.storage import Storage
from limits.aio.strategies import FixedWindowRateLimiter
from limits.storage import storage_from_string
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from budget_overflow.config import Settings
from budget_overflow.utils.exceptions import TooManyRequestsError
from budget_overflow.utils.logger import get_logger

logger = get_logger("rate_limit")

# 예산 이름 — Budget names, also used as the counter namespace
REGISTER_IP: str = "register-ip"
REGISTER_EMAIL_FAILURES: str = "register-email"
LOGIN_IP: str = "login-ip"
LOGIN_EMAIL_FAILURES: str = "login-email"
REFRESH_IP: str = "refresh-ip"

GENERIC_LIMIT_MESSAGE: str = "Too many requests. Please slow down."


def client_ip(request: Request) -> str:
    """요청 클라이언트 IP (Client address as seen by slowapi)."""
    return get_remote_address(request)


def build_limiter(settings: Settings) -> Limiter:
    """전역 요청 제한기를 생성합니다.

    Create the global slowapi limiter. Its default limits apply to every
    route once SlowAPIMiddleware is installed.
    """
    return Limiter(
        key_func=get_remote_address,
        default_limits=settings.RATE_LIMIT_DEFAULT,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """전역 한도 초과 응답 (Global budget exceeded → 429 with a generic message)."""
    logger.warning(
        "Global rate limit exceeded",
        extra={"event": "rate_limited", "path": request.url.path, "client_ip": client_ip(request)},
    )
    return JSONResponse(status_code=429, content={"detail": GENERIC_LIMIT_MESSAGE})


def _async_storage_uri(uri: str) -> str:
    # limits.aio 저장소는 async+ 접두사를 사용 — limits.aio storages use the async+ scheme prefix
    return uri if uri.startswith("async+") else f"async+{uri}"


class AuthRateGuard:
    """인증 엔드포인트 요청 제한기.

    Rate guard for the authentication endpoints.

    consume() counts every request against an IP budget; check() and
    record_failure() implement failure-only budgets keyed by normalized
    email, falling back to the client IP when no email was supplied.

    Attributes:
        enabled: 제한 활성화 여부 (Whether limits are enforced)
        storage: 카운터 저장소 (Counter storage)
    """

    def __init__(self, settings: Settings) -> None:
        self.enabled: bool = settings.RATE_LIMIT_ENABLED
        self.storage: Storage = storage_from_string(_async_storage_uri(settings.RATE_LIMIT_STORAGE_URI))
        self._limiter: FixedWindowRateLimiter = FixedWindowRateLimiter(self.storage)
        self._budgets: dict[str, tuple[RateLimitItem, str]] = {
            REGISTER_IP: (
                parse(settings.RATE_LIMIT_REGISTER_IP),
                "Too many registration attempts. Please slow down.",
            ),
            REGISTER_EMAIL_FAILURES: (
                parse(settings.RATE_LIMIT_REGISTER_EMAIL_FAILURES),
                "Too many registration attempts. Try again later.",
            ),
            LOGIN_IP: (parse(settings.RATE_LIMIT_LOGIN_IP), GENERIC_LIMIT_MESSAGE),
            LOGIN_EMAIL_FAILURES: (
                parse(settings.RATE_LIMIT_LOGIN_EMAIL_FAILURES),
                "Too many login attempts. Try again later.",
            ),
            REFRESH_IP: (
                parse(settings.RATE_LIMIT_REFRESH_IP),
                "Too many token refresh requests. Please slow down.",
            ),
        }

    @staticmethod
    def failure_key(email: str | None, ip: str) -> str:
        """실패 예산 키 — 이메일, 없으면 IP (Email key, or the IP when the email is missing)."""
        return f"email:{email}" if email else f"ip:{ip}"

    async def consume(self, budget: str, key: str) -> None:
        """요청 1회를 차감하고, 예산을 초과하면 429를 발생시킵니다.

        Count one request against the budget.

        Raises:
            TooManyRequestsError: 예산 초과 시 (Budget exhausted)
        """
        if not self.enabled:
            return
        item, message = self._budgets[budget]
        if not await self._limiter.hit(item, budget, key):
            logger.warning("Rate limit exceeded", extra={"event": "rate_limited", "path": budget})
            raise TooManyRequestsError(message)

    async def check(self, budget: str, key: str) -> None:
        """차감 없이 남은 예산을 확인합니다 (Raise 429 if the failure budget is already exhausted)."""
        if not self.enabled:
            return
        item, message = self._budgets[budget]
        if not await self._limiter.test(item, budget, key):
            logger.warning("Failure budget exhausted", extra={"event": "rate_limited", "path": budget})
            raise TooManyRequestsError(message)

    async def record_failure(self, budget: str, key: str) -> None:
        """실패 1회를 기록합니다 (Count one failed attempt)."""
        if not self.enabled:
            return
        item, _ = self._budgets[budget]
        await self._limiter.hit(item, budget, key)

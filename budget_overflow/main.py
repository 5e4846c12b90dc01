"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.

create_app() receives the settings object and wires every collaborator
(database engine, session factory, token issuer, password hasher, auth
service, rate limiters) onto app.state, so nothing below the app reads a
module-level configuration.

Run with:
    uvicorn budget_overflow.main:app
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from budget_overflow.api import auth, categories, transactions
from budget_overflow.config import Settings, get_settings
from budget_overflow.database import build_engine, build_session_factory
from budget_overflow.middleware.axiom_logging import AxiomLoggingMiddleware
from budget_overflow.middleware.rate_limit import (
    AuthRateGuard,
    build_limiter,
    rate_limit_exceeded_handler,
)
from budget_overflow.services.auth_service import AuthService
from budget_overflow.utils.exceptions import TooManyRequestsError
from budget_overflow.utils.jwt import TokenIssuer
from budget_overflow.utils.logger import get_logger, setup_logging
from budget_overflow.utils.password import PasswordHasher

logger = get_logger("app")


def first_validation_message(exc: RequestValidationError) -> str:
    """첫 번째 검증 오류를 사람이 읽을 수 있는 메시지로 변환합니다.

    Turn the first validation error into a human readable message. Rules
    raised from validators surface with their own text; built-in errors are
    prefixed with the offending field.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    error: dict[str, Any] = errors[0]
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message: str = error.get("msg", "Invalid request.")
    return f"{'.'.join(location)}: {message}" if location else message


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    try:
        await auth.record_rejected_body(request, exc.body)
    except TooManyRequestsError as limited:
        return JSONResponse(status_code=limited.status_code, content={"detail": limited.detail})
    return JSONResponse(status_code=400, content={"detail": first_validation_message(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 오류 — 서버 로그에만 기록하고 일반 메시지 반환.

    Log unexpected errors server-side with a traceback and answer with a
    generic 500 that leaks nothing.
    """
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={"event": "unhandled_error", "path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """애플리케이션을 생성합니다.

    Build the FastAPI application for the given settings.

    Args:
        settings: 애플리케이션 설정, None이면 환경 변수에서 로드
                  (Application settings; loaded from the environment when None)

    Returns:
        FastAPI: 구성된 애플리케이션 (Configured application)
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s", settings.APP_NAME, extra={"event": "startup"})
        yield
        await engine.dispose()
        logger.info("Stopped %s", settings.APP_NAME, extra={"event": "shutdown"})

    app: FastAPI = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # 앱 상태 — Collaborators shared by reference with every request
    issuer: TokenIssuer = TokenIssuer(settings)
    hasher: PasswordHasher = PasswordHasher(settings.BCRYPT_ROUNDS)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = issuer
    app.state.password_hasher = hasher
    app.state.auth_service = AuthService(settings, issuer, hasher)
    app.state.rate_guard = AuthRateGuard(settings)
    app.state.limiter = build_limiter(settings)

    # 예외 처리기 — Exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # 전역 IP 요청 제한 — Global per-IP budget for every route
    app.add_middleware(SlowAPIMiddleware)

    # Axiom API 로깅 미들웨어 — Axiom API request/response logging
    app.add_middleware(
        AxiomLoggingMiddleware,
        api_token=settings.AXIOM_API_TOKEN,
        dataset=settings.AXIOM_DATASET,
    )

    # CORS 미들웨어 — 별도 호스팅된 클라이언트, 쿠키 포함 (Separately hosted client, with credentials)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def health_check() -> dict[str, bool]:
        """서버 상태 확인 엔드포인트 (Health check for load balancers and monitoring)."""
        return {"ok": True}

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(transactions.router, prefix="/api/transactions", tags=["Transactions"])
    app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])

    return app


app: FastAPI = create_app()

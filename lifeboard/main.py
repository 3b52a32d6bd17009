"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from lifeboard.config import get_settings
from lifeboard.domain.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    StorageError,
)
from lifeboard.infrastructure.db.session import check_db_connection
from lifeboard.api.responses import error_body
from lifeboard.api.v1 import (
    auth,
    transactions,
    challenges,
    study,
    festivals,
    special_schedules,
    timetable,
    diary,
    life_plans,
    dashboard,
    profile,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Most specific first: DuplicateNameError is a ValidationError
ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (UnauthorizedError, 401),
    (ConflictError, 409),
    (StorageError, 503),
)


def status_for(exc: DomainError) -> int:
    for error_cls, status_code in ERROR_STATUS:
        if isinstance(exc, error_cls):
            return status_code
    return 500


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches ALL unhandled exceptions including sync routes"""

    async def dispatch(self, request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return JSONResponse(error_body(f"Internal Server Error: {exc}"), status_code=500)


def create_app() -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Returns:
        Настроенный FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="Lifeboard",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)

    # Middleware
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY
    )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        elif status_code == 409:
            logger.warning("Conflict on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(error_body(exc.message), status_code=status_code)

    # Routers
    app.include_router(auth.router)
    app.include_router(transactions.router)
    app.include_router(challenges.router)
    app.include_router(study.router)
    app.include_router(festivals.router)
    app.include_router(special_schedules.router)
    app.include_router(timetable.router)
    app.include_router(diary.router)
    app.include_router(life_plans.router)
    app.include_router(dashboard.router)
    app.include_router(profile.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (проверяет доступность БД)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "lifeboard.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )

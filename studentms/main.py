"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studentms.api.v1 import router as v1_router
from studentms.core.config import get_settings
from studentms.core.errors import AppError
from studentms.services.user_stats import StatsCache

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _error_response(
    status_code: int,
    error: dict[str, object],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error_response(exc.status_code, exc.to_dict(), headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return _error_response(
        400,
        {"message": "Validation failed", "code": "VALIDATION_ERROR", "errors": errors},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if exc.status_code == 404:
        message = f"Route {request.url.path} not found"
    return _error_response(
        exc.status_code,
        {"message": message, "code": HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")},
        getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method},
    )
    error: dict[str, object] = {"message": "Internal server error", "code": "SERVER_ERROR"}
    if get_settings().APP_ENV == "dev":
        error["details"] = str(exc)
    return _error_response(500, error)


def create_app() -> FastAPI:
    settings = get_settings()
    if settings.uses_default_jwt_secret:
        logger.warning("JWT_SECRET is not set; using the development default secret")

    app = FastAPI(
        title="Student Management System API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.stats_cache = StatsCache(timedelta(seconds=settings.STATS_CACHE_TTL_SEC))
    app.state.dashboard_cache = StatsCache(timedelta(seconds=settings.STATS_CACHE_TTL_SEC))

    # Cookie auth needs explicit origins (credentials cannot be combined with "*").
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Student Management System API"}

    return app


app = create_app()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError

from clubhouse.core.config import get_settings
from clubhouse.core.errors import ApiError, ServiceError, bad_request
from clubhouse.core.responses import error_response
from clubhouse.db.init_db import init_db
from clubhouse.routers.auth import router as auth_router
from clubhouse.routers.health import router as health_router
from clubhouse.routers.members import router as members_router
from clubhouse.routers.waitlist import router as waitlist_router

logger = logging.getLogger("clubhouse.api")

INTERNAL_ERROR = ServiceError(
    status.HTTP_500_INTERNAL_SERVER_ERROR,
    "internal_error",
    "An unexpected error occurred",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("Membership API ready")
    yield
    logger.info("Membership API shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.app_debug,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_and_guard_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = error_response(INTERNAL_ERROR)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        return error_response(exc.error)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(
            bad_request(
                "invalid_request",
                "Invalid request payload",
                {"errors": jsonable_encoder(exc.errors())},
            )
        )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(members_router)
    app.include_router(waitlist_router)
    return app


app = create_app()

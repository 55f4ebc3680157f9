"""FastAPI application wiring for routes, error handlers, and lifespan."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rankboard.api.errors import VALIDATION_ERROR, APIError
from rankboard.api.routes import router
from rankboard.logging_setup import configure_logging
from rankboard.models.schemas import ErrorBody, ErrorResponse
from rankboard.services.leaderboard import LeaderboardService
from rankboard.storage.redis import create_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    redis_client = create_redis_client()
    app.state.redis = redis_client
    app.state.leaderboard_service = LeaderboardService(redis_client)
    logger.info("Leaderboard API started")
    try:
        yield
    finally:
        await redis_client.aclose()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Leaderboard Query API", version="1.0.0", lifespan=app_lifespan)

    @app.exception_handler(APIError)
    async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
        logger.warning("Request failed with %s: %s", exc.code, exc.message)
        payload = ErrorResponse(
            error=ErrorBody(code=exc.code, message=exc.message, details=exc.details),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(
            error=ErrorBody(
                code=VALIDATION_ERROR,
                message="Request validation failed",
                details={"errors": jsonable_errors(exc)},
            ),
        )
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    app.include_router(router)
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Pydantic puts the raised exception object in ctx, which JSON cannot carry.
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


app = create_app()

from __future__ import annotations

import logging
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from spotbnb.core.config import settings
from spotbnb.core.errors import ApiError
from spotbnb.core.logging_config import configure_logging
from spotbnb.db.base import Base
from spotbnb.db.session import engine

import spotbnb.models

from spotbnb.routers import health, images, reviews, session, spots, users

configure_logging(log_dir=settings.log_dir, level=settings.log_level)
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "The requested resource couldn't be found."


def _envelope(title: str, message: str, errors: list[str] | None, stack: str | None = None) -> dict:
    return {
        "title": title,
        "message": message,
        "errors": errors,
        "stack": None if settings.is_production else stack,
    }


def _stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            content = _envelope("Resource Not Found", NOT_FOUND_MESSAGE, [NOT_FOUND_MESSAGE])
        else:
            content = {"message": str(exc.detail), "statusCode": exc.status_code}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return JSONResponse(status_code=400, content=_envelope("Validation error", "Bad request.", errors))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Integrity error: %s", exc.orig)
        return JSONResponse(
            status_code=400,
            content=_envelope("Validation error", "Bad request.", [str(exc.orig)], stack=_stack(exc)),
        )


def create_app() -> FastAPI:
    app = FastAPI(title="SpotBnB API", version="0.1.0")

    if not settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.on_event("startup")
    async def on_startup() -> None:
        Base.metadata.create_all(bind=engine)
        logger.info("DB ready")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error")
            return JSONResponse(
                status_code=500,
                content=_envelope("Server Error", str(exc) or "Internal server error", None, stack=_stack(exc)),
            )
        duration_ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration_ms)
        return response

    register_exception_handlers(app)

    app.include_router(session.router)
    app.include_router(users.router)
    app.include_router(spots.router)
    app.include_router(reviews.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


app = create_app()

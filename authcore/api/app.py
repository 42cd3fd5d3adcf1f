from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

import authcore.domain.entities  # noqa: F401  (registers tables on SQLModel.metadata)
from .error import ClientError, ServerError
from .middleware import get_request_id, request_logging_middleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _error_body(code: str, message: str, details=None) -> dict:
    error_dict = {"code": code, "message": message}
    if details:
        error_dict["details"] = details
    return {"error": error_dict}


async def handle_client_error(request: Request, exc: ClientError):
    details = [{"code": d.code, "description": d.description} for d in exc.base_error.details]
    body = _error_body(exc.base_error.code, exc.base_error.message, details)
    logger.warning(f"[{get_request_id(request)}] Client error: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"[{get_request_id(request)}] Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(exc.base_error.code, "Internal server error"),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "code": err.get("type", "invalid"),
            "description": f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}",
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VALIDATION_ERROR", "Request validation failed", details),
    )


async def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.exception(f"[{get_request_id(request)}] Store failure", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("STORE_FAILURE", "Internal server error"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from authcore.depends import engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    configure_logging(ApplicationConfig.LOG_LEVEL)

    app = FastAPI(title="Account Service", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(request_logging_middleware)

    from authcore.api.routes import auth, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)

    return app

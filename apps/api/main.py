"""
API Envelopes: FastAPI Application Entry Point
"""

import traceback
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import ApiError
from core.logging import configure_logging
from core.responses import err, ok

configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("api.startup", env=settings.APP_ENV, log_level=settings.LOG_LEVEL)
    yield
    logger.info("api.shutdown")


app = FastAPI(
    title="API Envelopes",
    description="Formato estándar de respuestas de éxito y de error.",
    version="1.0.0",
    docs_url="/docs" if settings.APP_ENV != "production" else None,
    redoc_url="/redoc" if settings.APP_ENV != "production" else None,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middlewares
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

# ---------------------------------------------------------------------------
# Exception handlers globales: todo fallo sale con la forma de ApiError
# ---------------------------------------------------------------------------


def error_response(request: Request, exc: ApiError, headers: dict | None = None) -> JSONResponse:
    """Loguea la traza en el servidor y serializa el error para el cliente."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "api_error",
        path=request.url.path,
        status_code=exc.status_code,
        message=exc.message,
        trace=exc.trace,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(err(exc, include_trace=settings.expose_trace)),
        headers=headers,
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = getattr(exc, "headers", None)
    detail = exc.detail
    # Un detail estructurado se conserva como lista de errores
    if isinstance(detail, dict):
        api_exc = ApiError(exc.status_code, errors=[detail])
    elif isinstance(detail, list):
        api_exc = ApiError(exc.status_code, errors=detail)
    else:
        api_exc = ApiError(exc.status_code, str(detail))
    return error_response(request, api_exc, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        request,
        ApiError(422, "Validation failed", list(exc.errors())),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error_response(
        request,
        ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, trace=trace),
    )


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    return ok(data={"status": "ok", "env": settings.APP_ENV})


# ---------------------------------------------------------------------------
# Servidor
# ---------------------------------------------------------------------------


def run() -> None:
    """Arranca el servidor con uvicorn. Uso: api-envelopes (o python -m main)."""
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()

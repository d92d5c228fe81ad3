import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from advisor.api.routes import health, shopping
from advisor.config import settings
from advisor.errors import UpstreamError, ValidationError
from advisor.logging import configure_logging
from advisor.pipeline.catalog import build_catalog
from advisor.utils.llm import build_text_model

configure_logging()

logger = structlog.get_logger()

UPSTREAM_MESSAGE = "Something went wrong. Please try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the catalog and text model once; close the catalog on shutdown."""
    app.state.catalog = build_catalog(settings)
    app.state.model = build_text_model(settings)
    logger.info(
        "advisor_started",
        catalog_mode=settings.catalog_mode,
        llm_provider=settings.llm_provider,
        llm_configured=app.state.model is not None,
    )
    try:
        yield
    finally:
        await app.state.catalog.aclose()


app = FastAPI(
    title="Product Advisor API",
    version=health.VERSION,
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)


def _with_request_id(request: Request, response: JSONResponse) -> JSONResponse:
    response.headers["X-Request-ID"] = getattr(
        request.state, "request_id", request.headers.get("X-Request-ID", "")
    )
    return response


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Attach a unique request ID to every request for log correlation.

    The ID is bound into structlog context vars, so every event logged while
    serving the request carries it, and echoed in the X-Request-ID header.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Return ErrorResponse JSON instead of FastAPI's default ``{"detail": [...]}``."""
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    response = JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": "; ".join(messages),
            "retryable": False,
        },
    )
    return _with_request_id(request, response)


@app.exception_handler(ValidationError)
async def advisor_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    response = JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": str(exc),
            "retryable": False,
            "detail": exc.field,
        },
    )
    return _with_request_id(request, response)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Catalog or model failure. The user only ever sees a generic retry message."""
    logger.error(
        "upstream_error",
        path=request.url.path,
        source=exc.source,
        status_code=exc.status_code,
        status_text=exc.status_text,
    )
    response = JSONResponse(
        status_code=502,
        content={
            "error": "upstream_error",
            "message": UPSTREAM_MESSAGE,
            "retryable": True,
            "detail": exc.source,
        },
    )
    return _with_request_id(request, response)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return consistent ErrorResponse JSON for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    response = JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "retryable": True,
        },
    )
    return _with_request_id(request, response)


app.include_router(health.router)
app.include_router(shopping.router, prefix="/api/v1")

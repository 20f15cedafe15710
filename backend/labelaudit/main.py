import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from labelaudit.api.v1.labels import router as labels_router
from labelaudit.core.config import get_settings
from labelaudit.services.ai.common.errors import ConfigurationError, ResponseFormatError, ServiceError

settings = get_settings()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Label Audit API",
    version="0.1.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)


if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

app.include_router(labels_router, prefix="/api/v1", tags=["labels"])


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.exception_handler(ConfigurationError)
async def _configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=503, content={"detail": "Label extraction is not configured"})


@app.exception_handler(ServiceError)
async def _service_error_handler(request: Request, exc: ServiceError):
    content = {"detail": "Label extraction service failed"}
    if settings.expose_error_details:
        content["error"] = str(exc)
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(ResponseFormatError)
async def _response_format_error_handler(request: Request, exc: ResponseFormatError):
    content = {"detail": "Label extraction returned an unreadable response"}
    if settings.expose_error_details:
        content["raw_text"] = exc.raw_text
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Hide internal details for 5xx unless explicitly enabled.
    if exc.status_code >= 500 and not settings.expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    if settings.expose_error_details:
        return JSONResponse(status_code=500, content={"detail": str(exc)})
    return JSONResponse(status_code=500, content={"detail": "Internal error"})

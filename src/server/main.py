"""FastAPI application serving the cvcanvas API."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cvcanvas.exceptions import MalformedRecordError, StorageUnavailableError
from cvcanvas.utils.logging_config import configure_logging, get_logger
from server.routers import cvs, sections
from server.server_config import APP_DESCRIPTION, APP_TITLE, CORS_ORIGINS

configure_logging()
logger = get_logger(__name__)

app = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION)

if CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(cvs.router)
app.include_router(sections.router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: ARG001
    """Report HTTP errors with the same payload shape as storage errors."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(MalformedRecordError)
async def malformed_record_handler(request: Request, exc: MalformedRecordError) -> JSONResponse:
    """Stored data exists but cannot be read back as a document."""
    logger.error("Malformed stored record", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": f"Stored record is corrupted: {exc}"},
    )


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    logger.error("Storage unavailable", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": f"Storage unavailable: {exc}"},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}

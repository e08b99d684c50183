"""
Image Toolkit Backend - FastAPI Application Entry Point
"""

import logging
import platform
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.common import HealthResponse
from routers import config, diff, icon, merge
from services.config_manager import ConfigManager
from services.errors import ToolkitError, create_error_response, get_http_status_for_error, log_error
from services.logger import setup_logger
from services.performance import PerformanceMonitor

__version__ = "1.0.0"

setup_logger()
logger = logging.getLogger("image_toolkit")

START_TIME = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logger.info("Starting Image Toolkit Backend...")
    config_manager = ConfigManager.get_instance()
    logger.info("ConfigManager initialized from %s", config_manager.config_file)

    yield
    logger.info("Shutting down Image Toolkit Backend...")


app = FastAPI(
    title="Image Toolkit Backend",
    description="Image merge, icon cropping and text file comparison",
    version=__version__,
    lifespan=lifespan,
)

# The browser front end is served from a different origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(merge.router, prefix="/api", tags=["merge"])
app.include_router(icon.router, prefix="/api/icon-maker", tags=["icon"])
app.include_router(diff.router, prefix="/api/file-diff", tags=["diff"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


def _error_json(error, status_code: int, details=None) -> JSONResponse:
    body = create_error_response(error, details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ToolkitError)
async def toolkit_error_handler(request: Request, exc: ToolkitError):
    status_code = get_http_status_for_error(exc)
    if status_code >= 500:
        log_error(request.url.path, exc)
    else:
        logger.warning("%s rejected: %s", request.url.path, exc.message)
    return _error_json(exc.message, status_code, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query"))
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    logger.warning("%s rejected: %s", request.url.path, "; ".join(messages))
    return _error_json("; ".join(messages) or "Invalid request.", 400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_json(str(exc.detail), exc.status_code)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.monotonic() - START_TIME,
        performance=PerformanceMonitor.get_instance().get_metrics(),
        version=__version__,
        python_version=platform.python_version(),
    )


if __name__ == "__main__":
    import uvicorn

    config_manager = ConfigManager.get_instance()
    uvicorn.run(app, host=config_manager.get("server", "host"), port=config_manager.get("server", "port"))

"""
Guest Post Manager API.

Run locally with `python main.py` or `uvicorn main:app --reload`.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, check_connection
from routes import guest_blog_sites_router

API_VERSION = "0.1.0"
GUEST_SITES_PREFIX = "/api/guest-sites"


def configure_logging(level: str, json_output: bool) -> None:
    """Route structlog through stdlib logging; JSON lines in production."""
    logging.basicConfig(format="%(message)s", level=level)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, json_output=settings.is_production)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report database reachability on startup. Nothing to release on shutdown."""
    logger.info("api_starting", environment=settings.environment, debug=settings.debug)

    db_status = check_connection()
    if db_status["status"] == "healthy":
        logger.info("database_ready", **db_status["tables"])
    else:
        # Keep serving; /health reports the degraded state
        logger.error("database_unavailable", error=db_status.get("error"))

    yield

    logger.info("api_stopped")


app = FastAPI(
    title="Guest Post Manager",
    description="Guest blog site inventory, client pricing and bulk spreadsheet uploads",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(guest_blog_sites_router, prefix=GUEST_SITES_PREFIX, tags=["Guest Blog Sites"])


# ===================
# SERVICE ENDPOINTS
# ===================

@app.get("/health")
async def health_check():
    db_status = check_connection()
    return {
        "status": "healthy" if db_status["status"] == "healthy" else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.environment,
        "database": db_status,
    }


@app.get("/")
async def root():
    """API name, version and the bulk upload entry points."""
    return {
        "name": "Guest Post Manager API",
        "version": API_VERSION,
        "docs": "/docs" if settings.debug else None,
        "health": "/health",
        "endpoints": {
            "guest_sites": GUEST_SITES_PREFIX,
            "bulk_upload_template": f"{GUEST_SITES_PREFIX}/bulk-upload/template",
            "bulk_upload_parse": f"{GUEST_SITES_PREFIX}/bulk-upload/parse",
        },
    }


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort for errors the routes did not translate."""
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.debug else None,
                "timestamp": datetime.utcnow().isoformat(),
            }
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)

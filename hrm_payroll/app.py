from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hrm_payroll.core.settings import Settings, load_settings
from hrm_payroll.infrastructure import HttpFeedClient, InMemoryFeedClient, configure_feed_client
from hrm_payroll.logging_config import configure_logging, get_logger
from hrm_payroll.routes import attendance, payroll

logger = get_logger(__name__)


def _install_feed_client(settings: Settings) -> None:
    if settings.feed_base_url:
        client = HttpFeedClient(
            settings.feed_base_url,
            token=settings.feed_token,
            timeout=settings.feed_timeout,
        )
        configure_feed_client(client)
        logger.info("using HTTP feeds", extra={"base_url": settings.feed_base_url})
    elif settings.feeds_dir and settings.feeds_dir.is_dir():
        configure_feed_client(InMemoryFeedClient.from_directory(settings.feeds_dir))
        logger.info("using JSON feeds", extra={"feeds_dir": str(settings.feeds_dir)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(level=settings.log_level)

    app = FastAPI(title="HRM Payroll API", version="0.1.0")
    _install_feed_client(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(payroll.router, prefix="/api")
    app.include_router(attendance.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "HRM Payroll API",
                "docs": "/docs",
                "health": "/api/payrolls/summary",
            }
        )

    return app


app = create_app()

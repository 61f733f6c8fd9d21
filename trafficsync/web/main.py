"""Main web application - FastAPI server with REST API, live channel and SSE."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core.runtime import build_runtime
from ..shared.db.seed import ensure_default_admin, seed_demo_devices
from ..shared.logging import setup_logger
from .api import live_router, router as api_router
from .auth import hash_password
from .config import WebConfig, config
from .errors import register_error_handlers

logger = setup_logger(__name__)


def create_app(cfg: Optional[WebConfig] = None) -> FastAPI:
    """Build the application; the runtime is created when the app starts."""
    cfg = cfg or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown events."""
        logger.info("Traffic Sync - Web Service starting")

        # Validate configuration
        for warning in cfg.validate():
            logger.warning(warning)

        runtime = build_runtime(cfg)
        await runtime.start()
        app.state.runtime = runtime

        if cfg.SEED_DEMO_DATA:
            await ensure_default_admin(
                runtime.session_factory,
                cfg.DEFAULT_ADMIN_EMAIL,
                hash_password(cfg.DEFAULT_ADMIN_PASSWORD),
            )
            await seed_demo_devices(runtime.session_factory)

        logger.info(
            f"Listening on {cfg.HOST}:{cfg.PORT} "
            f"(fan-out: {cfg.FANOUT_BACKEND}, production: {cfg.is_production()})"
        )

        yield  # Application runs here

        logger.info("Shutting down")
        await runtime.stop()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Traffic Sync API",
        description="Device state synchronization and live fan-out for traffic monitoring",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if not cfg.is_production() else None,
        redoc_url="/redoc" if not cfg.is_production() else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cfg.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(api_router)
    app.include_router(live_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "trafficsync",
            "version": __version__,
        }

    return app


app = create_app()


def main():
    """Main entry point."""
    import uvicorn

    uvicorn.run(
        "trafficsync.web.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=not config.is_production(),
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

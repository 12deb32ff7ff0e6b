import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from dhaba_ledger.core.config import Settings, settings
from dhaba_ledger.core.cache import CacheError, DriverListCache, RedisClient
from dhaba_ledger.db.session import Database
from dhaba_ledger.api.v1.api import api_router
from dhaba_ledger.api.errors import register_exception_handlers

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def _open_driver_cache(app_settings: Settings) -> Optional[DriverListCache]:
    client = RedisClient.from_config(app_settings.redis_config)
    try:
        client.ping()
    except CacheError as e:
        client.close()
        logger.error(f"Failed to initialize Redis: {str(e)}")
        logger.warning("Running without Redis - the driver list will not be cached")
        return None
    logger.info("Redis connection established")
    return DriverListCache(client, ttl=app_settings.DRIVER_LIST_CACHE_TTL)


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        # Startup
        logger.info("Starting application...")

        database = Database(
            app_settings.DATABASE_URL,
            echo=app_settings.DATABASE_ECHO,
            pool_timeout=app_settings.DATABASE_POOL_TIMEOUT,
        )
        database.open()
        if app_settings.AUTO_CREATE_TABLES:
            database.create_all()
        app.state.database = database

        app.state.driver_cache = None
        if app_settings.cache_enabled:
            app.state.driver_cache = _open_driver_cache(app_settings)

        yield

        # Shutdown
        logger.info("Shutting down application...")

        if app.state.driver_cache is not None:
            app.state.driver_cache.client.close()
            logger.info("Redis connection closed")

        database.close()

    # Create FastAPI app with lifespan events
    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.PROJECT_VERSION,
        debug=app_settings.DEBUG,
        openapi_url=f"{app_settings.API_V1_STR}/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = app_settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=app_settings.API_V1_STR)

    # Health check endpoint
    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint."""
        database_ok = request.app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": "ok" if database_ok else "unavailable",
            "version": app_settings.PROJECT_VERSION,
            "environment": app_settings.ENVIRONMENT,
            "debug": app_settings.DEBUG
        }

    return app


app = create_app()

"""
FormFlow Workflow Service - FastAPI application

Serves form definitions, accepts submissions and runs each form's workflow
before answering the submit request.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import httpx
from pymongo.errors import PyMongoError

from .config.settings import Settings, settings
from .api.routes import api_router
from .api.middleware import CORRELATION_HEADER, CorrelationIdMiddleware, register_error_handlers
from .repositories.mongo_client import create_indexes, close_connection, health_check
from .utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

APP_NAME = "FormFlow Workflow Service"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: ensure MongoDB indexes, open the outbound HTTP client shared by
    webhook, integration and notification steps.

    Shutdown: close that client and the MongoDB connection.
    """
    logger.info(f"Starting {APP_NAME} {APP_VERSION} ({settings.environment})")

    try:
        create_indexes()
    except PyMongoError as e:
        # Submissions still fail fast with 503 until MongoDB is reachable
        logger.error(f"Index creation skipped, MongoDB unavailable: {e}")

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    yield

    await app.state.http_client.aclose()
    close_connection()
    logger.info(f"{APP_NAME} stopped")


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application: middleware, error envelope, /api routes, health"""
    docs_enabled = config.debug
    application = FastAPI(
        title=APP_NAME,
        description="Form definitions, submissions and server-side workflow execution",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
    )

    _add_middleware(application, config)
    register_error_handlers(application)
    application.include_router(api_router, prefix="/api")
    _add_health_routes(application, config)

    return application


def _add_middleware(app: FastAPI, config: Settings) -> None:
    # Browsers reject credentialed requests against a wildcard origin
    allow_all = config.cors_origins.strip() == "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else config.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    app.add_middleware(CorrelationIdMiddleware)


def _add_health_routes(app: FastAPI, config: Settings) -> None:

    @app.get("/health", tags=["Health"])
    async def health():
        """Service status; degraded when MongoDB does not answer a ping"""
        mongo = health_check()
        return {
            "status": "healthy" if mongo.get("status") == "healthy" else "degraded",
            "version": APP_VERSION,
            "environment": config.environment,
            "mongo": mongo,
        }

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "docs": "/api/docs" if config.debug else None,
        }


app = create_app()

"""FastAPI main application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .db import MongoConnection, ConversationRepository, ProjectRepository
from .services import ConversationQueryService
from .utils.logger import init_app_logger
from .api.v1 import conversations


# Initialize logger
logger = init_app_logger(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting conversation query service...")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Database: {settings.mongo_database}")
    logger.info(f"  Default env: {settings.default_env}")

    connection = MongoConnection(
        uri=settings.mongo_uri,
        database=settings.mongo_database,
        timeout_ms=settings.mongo_timeout_ms,
    )
    store = ConversationRepository(
        connection.database[settings.conversations_collection],
        allow_disk_use=settings.allow_disk_use,
    )
    projects = ProjectRepository(connection.database[settings.projects_collection])

    # Set query service in API modules
    conversations.query_service = ConversationQueryService(
        store, projects, default_env=settings.default_env
    )
    logger.info("Conversation query service started")

    yield

    logger.info("Shutting down conversation query service...")
    conversations.query_service = None
    connection.close()


# Create FastAPI application
app = FastAPI(
    title="Conversation Query Engine",
    description="Filtering, funnel analysis and pagination over recorded conversations",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routers
app.include_router(conversations.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "Conversation Query Engine"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "convquery.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

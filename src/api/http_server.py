"""FastAPI HTTP server setup."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import DEFAULT_TOKEN_SECRET, Settings
from database import DatabaseManager

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    logger.info("Starting DayPlanner server...")

    app.state.db_manager.initialize()

    if app.state.settings.password:
        logger.info("Password authentication enabled")
        if app.state.settings.token_secret == DEFAULT_TOKEN_SECRET:
            logger.warning("Using default token secret - set TODO_TOKEN_SECRET in production!")
    else:
        logger.info("Password is not set, task routes are open")

    logger.info("DayPlanner server started successfully")

    yield

    # Shutdown
    logger.info("Shutting down DayPlanner server...")
    app.state.db_manager.close()
    logger.info("DayPlanner server shut down")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request data is a client error."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request data"})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create the application.

    Settings are read from the environment when none are given.
    """
    if app_settings is None:
        app_settings = Settings()

    app = FastAPI(
        title="DayPlanner",
        description="Personal task planner with repeating tasks",
        version=VERSION,
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.db_manager = DatabaseManager(app_settings.sqlalchemy_url, echo=app_settings.database_echo)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Import and include routers
    from .endpoints import router
    from .auth import router as auth_router

    app.include_router(router, prefix="/api")
    app.include_router(auth_router, prefix="/api")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "dayplanner",
            "version": VERSION
        }

    # Web frontend, mounted last so API routes take precedence
    web_dir = Path(app_settings.web_dir)
    if web_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(web_dir), html=True), name="web")
    else:
        logger.warning(f"Web directory '{web_dir}' not found, static files are not served")

    return app

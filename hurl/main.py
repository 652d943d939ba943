"""
Hurl - FastAPI Application Entry Point

Compose an HTTP request, run it server-side, and get back a readable
rendering of the request that was sent and the response that came back.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import get_settings
from .database import init_db
from .exceptions import register_exception_handlers
from .logging_config import configure_logging
from .routers import hurls


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    configure_logging(settings)
    # Startup: Initialize database
    init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Make HTTP requests and see exactly what was sent and received",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    debug=settings.debug,
    lifespan=lifespan
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Cookie session holding each browser's hurl history
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

# Register global exception handlers
register_exception_handlers(app)

# Register routers
app.include_router(hurls.router)

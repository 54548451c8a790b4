"""
Directorio Empresarial API - Main Application

Business directory and admin back-office: companies, categories,
membership plans, certificates, roles, users and opinions.

- Conditional API docs (disabled in production by default)
- Request/correlation IDs on every log line and error body
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.api.routes.router import api_router
from app.config import settings
from app.database import async_session_maker, init_db
from app.exceptions import DirectoryException, create_exception_handlers
from app.middleware import CorrelationIdMiddleware, CorrelationLogFilter
# Import all models to register them with SQLAlchemy metadata before init_db()
from app.models import (
    User, Company, CompanyCategory, CompanyCertificate, Category,
    MembershipType, Certificate, Role, Opinion
)
from app.services.seed import seed_default_data

APP_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(CorrelationLogFilter())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Directorio Empresarial API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    # Don't log the full database URL, it may carry credentials
    logger.info(f"Database URL prefix: {settings.DATABASE_URL.split('://')[0]}")

    await init_db()
    logger.info("Database initialized successfully")

    if settings.SEED_DEFAULT_DATA:
        async with async_session_maker() as session:
            await seed_default_data(session)
    yield
    # Shutdown
    logger.info("Shutting down Directorio Empresarial API...")


docs_url = "/docs" if settings.docs_enabled else None
redoc_url = "/redoc" if settings.docs_enabled else None

app = FastAPI(
    title="Directorio Empresarial API",
    description="Business directory and admin back-office",
    version=APP_VERSION,
    docs_url=docs_url,
    redoc_url=redoc_url,
    lifespan=lifespan,
)

# CORS middleware
allowed_origins = [settings.FRONTEND_URL]

# Local frontends during development
if not settings.is_production:
    allowed_origins.extend([
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Correlation-ID"],
)
app.add_middleware(CorrelationIdMiddleware)

# Exception handlers
handlers = create_exception_handlers(allowed_origins)
app.add_exception_handler(DirectoryException, handlers["directory"])
app.add_exception_handler(StarletteHTTPException, handlers["http"])
app.add_exception_handler(RequestValidationError, handlers["validation"])
app.add_exception_handler(SQLAlchemyError, handlers["storage"])
app.add_exception_handler(Exception, handlers["generic"])

# Include routers
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    response = {
        "name": "Directorio Empresarial API",
        "version": APP_VERSION,
        "health": "/health",
    }
    # Only include docs link if enabled
    if settings.docs_enabled:
        response["docs"] = "/docs"
    return response


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# For running with uvicorn directly (development only)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG,
    )

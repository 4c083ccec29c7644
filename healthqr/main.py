"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .config import settings
from .database import engine, Base
from .auth import models as auth_models  # noqa: F401 - registers the users table
from .profiles import models as profile_models  # noqa: F401 - registers the profiles table
from .auth.router import router as auth_router
from .profiles.router import router as profiles_router
from .qr.router import router as qr_router
from .views.router import router as views_router
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting Health Profile QR service...")

# Create FastAPI application
app = FastAPI(
    title="Health Profile QR",
    description="Health profile editor with a public emergency view reachable by QR code",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "version": app.version}

# Include routers; the HTML views come last because they end in a catch-all
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(profiles_router, prefix="/api/v1/profiles", tags=["Profiles"])
app.include_router(qr_router, prefix="/api/v1/qr", tags=["QR Code"])
app.include_router(views_router, include_in_schema=False)

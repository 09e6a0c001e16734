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
from .auth.router import router as auth_router
from .email_verification.router import router as email_verification_router
from .password_reset.router import router as password_reset_router, questions_router as security_questions_router
from .database import engine, Base
from .config import settings
from .auth import models as auth_models  # noqa: F401 - register role tables
from .email_verification import models as email_verification_models  # noqa: F401
from .password_reset import models as password_reset_models  # noqa: F401
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting Dental Clinic API...")

# Create FastAPI application
app = FastAPI(
    title="Dental Clinic API",
    description="Identity and session API for the dental clinic management system",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

# Refresh cookies are cross-site, so credentials must be allowed
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router)
app.include_router(email_verification_router)
app.include_router(password_reset_router)
app.include_router(security_questions_router)

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to Dental Clinic API", "version": app.version}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}

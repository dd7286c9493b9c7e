"""
Main FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from finappo.config import get_settings
from finappo.api import router as api_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Loan, savings, tax and real estate investment calculators",
    version=settings.version,
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")

logger.info("%s %s started (%s)", settings.app_name, settings.version, settings.app_env)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": settings.version}

"""
FlexiSpace - Main FastAPI Application
"""

import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .routes import auth, booking, dashboard, favorite, invoice, notification, pages, review, space

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Marketplace for booking workspaces and event venues",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - " f"Status: {response.status_code} - " f"Time: {process_time:.3f}s"
    )

    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error occurred"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize database on startup"""
    logger.info(f"Starting {settings.APP_NAME}...")

    # Initialize database tables
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise

    if not settings.sms_enabled:
        logger.warning("Twilio is not configured; SMS notifications will be recorded as failed")

    logger.info(f"Started in {settings.ENVIRONMENT} mode")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.APP_NAME}...")


# Include routers
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(space.router, prefix=API_PREFIX)
app.include_router(booking.router, prefix=API_PREFIX)
app.include_router(invoice.router, prefix=API_PREFIX)
app.include_router(review.router, prefix=API_PREFIX)
app.include_router(favorite.router, prefix=API_PREFIX)
app.include_router(notification.router, prefix=API_PREFIX)
app.include_router(dashboard.router, prefix=API_PREFIX)
app.include_router(pages.router)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy", "timestamp": time.time()}


# API info endpoint
@app.get("/api/info")
async def api_info():
    """Get API information"""
    return {
        "app_name": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "docs": "/docs" if settings.DEBUG else "disabled",
        "features": {
            "spaces": True,
            "bookings": True,
            "invoices": True,
            "reviews": True,
            "favorites": True,
            "sms_notifications": settings.sms_enabled,
        },
        "endpoints": {
            "auth": f"{API_PREFIX}/auth",
            "spaces": f"{API_PREFIX}/spaces",
            "bookings": f"{API_PREFIX}/bookings",
            "invoices": f"{API_PREFIX}/invoices",
            "reviews": f"{API_PREFIX}/reviews",
            "favorites": f"{API_PREFIX}/favorites",
            "notifications": f"{API_PREFIX}/notifications",
            "dashboard": f"{API_PREFIX}/dashboard",
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "flexispace.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
    )

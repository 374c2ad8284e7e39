"""
Telecom Asset Tracker - FastAPI Application
Main entry point for the API server
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import structlog
from contextlib import asynccontextmanager

from asset_tracker.api.routes import alerts, analytics, dashboard, devices, health, locations, utilization_logs
from asset_tracker.core.config import settings
from asset_tracker.core.exceptions import DataAccessError, InvalidActionError
from asset_tracker.core.log_config import configure_logging

# Configure structured logging
configure_logging()

logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Telecom Asset Tracker API", port=settings.api_port)
    # Startup
    yield
    # Shutdown
    logger.info("Shutting down Telecom Asset Tracker API")

# Create FastAPI application
app = FastAPI(
    title="Telecom Asset Tracker API",
    description="Devices, locations, utilization logs, alert rules and utilization analytics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(devices.router, prefix="/api/v1", tags=["devices"])
app.include_router(locations.router, prefix="/api/v1", tags=["locations"])
app.include_router(utilization_logs.router, prefix="/api/v1", tags=["utilization"])
app.include_router(alerts.router, prefix="/api/v1", tags=["alerts"])
app.include_router(analytics.router, prefix="/api/v1", tags=["analytics"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Telecom Asset Tracker API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health"
    }

@app.exception_handler(InvalidActionError)
async def invalid_action_handler(request: Request, exc: InvalidActionError):
    logger.warning("Invalid action requested", action=exc.action, path=request.url.path)
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid action"}
    )

@app.exception_handler(DataAccessError)
async def data_access_handler(request: Request, exc: DataAccessError):
    logger.error("Data access failed", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

if __name__ == "__main__":
    uvicorn.run(
        "asset_tracker.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )

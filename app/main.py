from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.api.routers import units, export, communities, features, msa
from app.core.config import settings
from app.core.database import engine
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Feature Analyst API",
    description="API for searching and comparing multifamily rental units by feature",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(units.router, prefix="/api/units", tags=["units"])
app.include_router(export.router, prefix="/api/export", tags=["export"])
app.include_router(communities.router, prefix="/api/communities", tags=["communities"])
app.include_router(features.router, prefix="/api/features", tags=["features"])
app.include_router(msa.router, prefix="/api/msa", tags=["msa"])

@app.on_event("startup")
async def startup_event():
    logger.info(f"Feature Analyst API started (log level {settings.LOG_LEVEL})")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    try:
        await engine.dispose()
        logger.info("Application shutdown completed successfully")
    except SQLAlchemyError as e:
        logger.error(f"Error during shutdown: {e}")

@app.get("/")
async def root():
    return {"message": "Feature Analyst API"}

@app.get("/health")
async def health_check():
    """Health check endpoint that verifies the database connection"""
    health_status = {
        "status": "healthy",
        "services": {}
    }

    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        health_status["services"]["database"] = "healthy"
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["services"]["database"] = "unhealthy"

    return health_status

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from perfhub.api.export_routes import router as export_router
from perfhub.api.report_routes import router as report_router
from perfhub.core.config import settings
from perfhub.core.db import (
    check_database_connection,
    close_engine,
    initialize_database,
    is_database_initialized,
)
from perfhub.core.logging import setup_logger

logger = setup_logger(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

# Browsers need Content-Disposition exposed to read the download filename
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(export_router)
app.include_router(report_router)


@app.on_event("startup")
async def connect_performance_db():
    """Connect to the performance database; the API still starts without it."""
    logger.info(f"service_start=true app={settings.APP_NAME} env={settings.ENV}")
    try:
        await initialize_database()
    except Exception as e:
        logger.warning(f"db_unavailable=true exports_disabled=true error={e}")
    else:
        logger.info("db_connected=true")


@app.on_event("shutdown")
async def release_performance_db():
    await close_engine()
    logger.info("service_stop=true")


@app.get("/health")
async def health_check():
    """Report service liveness and whether exports can reach the database."""
    available, error = await check_database_connection()
    return {
        "status": "ok",
        "database": {
            "initialized": is_database_initialized(),
            "available": available,
            "error": error,
        },
    }

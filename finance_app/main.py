# finance_app/main.py
import logging
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finance_app.core.config import settings
from finance_app.core.logging_config import configure_logging
from finance_app.api.v1.api import api_router as api_router_v1
from finance_app.db.database import create_tables, close_db

logger = logging.getLogger(__name__)


def get_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json"
    )

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.on_event("startup")
    async def on_startup() -> None:
        if settings.DB_CREATE_TABLES:
            logger.info("Creating database tables")
            await create_tables()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Closing database")
        await close_db()

    app.include_router(api_router_v1, prefix=settings.API_V1_STR)

    @app.get("/")
    async def root() -> Dict[str, str]:
        return {"message": f"Welcome to {settings.PROJECT_NAME}"}

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    logger.info("%s started", settings.PROJECT_NAME)
    return app


app = get_app()

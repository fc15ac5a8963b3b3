import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from lms_admin.api.v1.router import api_router
from lms_admin.api.web import staff_controller
from lms_admin.clients.eureka_client import register_with_eureka, deregister_from_eureka
from lms_admin.config import get_settings
from lms_admin.db.session import init_db, close_db
from lms_admin.schemas.generic import HealthResponse
from lms_admin.utils.exception_handlers import register_exception_handlers
from lms_admin.utils.log import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator:
    """Lifecycle events"""
    # STARTUP
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    await init_db()
    await register_with_eureka()

    yield

    # SHUTDOWN
    logger.info(f"Shutting down {settings.app_name}")
    await deregister_from_eureka()
    await close_db()


# Create app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="LMS admin back office: course content and staff management",
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


# Health check
@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
    }


# Include routers
app.include_router(api_router, prefix="/api/v1")
app.include_router(staff_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lms_admin.main:app", host=settings.app_host, port=settings.app_port)

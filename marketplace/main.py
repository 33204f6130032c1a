"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from marketplace.config import settings
from marketplace.database import test_database_connection, close_db_connection
from marketplace.routers import (
    auth_router,
    properties_router,
    saved_properties_router,
    admin_auth_router,
    admin_router,
)
from marketplace.utils.exceptions import APIException
from marketplace.services.error_handler import ErrorHandlerService
from marketplace.middleware import RequestContextMiddleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if not settings.is_testing:
        db_connected = await test_database_connection()
        if not db_connected:
            logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Property marketplace API for sale and rent listings.

    ## Features

    * **Listings**: Owners create, edit and delete their sale and rent listings
    * **Browse**: Filter by type, price range and distance from a point
    * **Saved properties**: Users bookmark listings
    * **Images**: Upload listing photos with validation
    * **Admin dashboard**: Separate admin accounts moderate listings, users and bookmarks

    ## Authentication

    Users sign in at `/api/v1/auth/login`; admins at `/api/v1/admin/auth/login`.
    Send the returned token as `Authorization: Bearer <token>`. Admin sessions last 8 hours.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "User sign-up, login and tokens"},
        {"name": "Properties", "description": "Browsing and owner listing management"},
        {"name": "Saved Properties", "description": "User bookmarks"},
        {"name": "Admin Authentication", "description": "Admin sessions"},
        {"name": "Admin", "description": "Admin dashboard operations"},
        {"name": "Health", "description": "System health endpoints"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    RequestContextMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(saved_properties_router, prefix=settings.api_v1_prefix)
app.include_router(admin_auth_router, prefix=settings.api_v1_prefix)
app.include_router(admin_router, prefix=settings.api_v1_prefix)

app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


@app.get("/health/db", tags=["Health"])
async def database_health_check():
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "database": "connected",
        "database_url": settings.database_url.split("@")[1] if "@" in settings.database_url else "hidden"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "marketplace.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from property_manager.config import settings
from property_manager.database import check_database_connection, close_db_connection, create_tables
from property_manager.routers import auth_router, properties_router
from property_manager.utils.exceptions import APIException
from property_manager.services.error_handler import ErrorHandlerService
from property_manager.middleware import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await check_database_connection()
    if db_connected:
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Backend for a property-management application.

    ## Features

    * **Accounts**: signup, signin and password reset by email
    * **Property setup**: property details, inventory and logo upload

    ## Authentication

    `/signin` returns a JWT. Send it as `Authorization: Bearer <token>` to `/property-setup`.
    """,
    openapi_tags=[
        {
            "name": "Authentication",
            "description": "User registration, login and password reset"
        },
        {
            "name": "Properties",
            "description": "Property and inventory setup"
        },
        {
            "name": "Health",
            "description": "Service health endpoints"
        }
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing,
)

app.include_router(auth_router)
app.include_router(properties_router)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors with appropriate error responses."""
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle framework HTTP exceptions with structured error responses."""
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic service information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    db_healthy = await check_database_connection()

    if not db_healthy:
        raise HTTPException(
            status_code=503,
            detail="Database connection failed"
        )

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn
    uvicorn.run(
        "property_manager.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()

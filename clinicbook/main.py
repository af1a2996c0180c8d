from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn
import logging
import sys

from clinicbook.core.config import settings
from clinicbook.core.database_utils import check_database_connection, get_db_session
from clinicbook.core.exceptions import ClinicBookError
from clinicbook.db.base import Base
from clinicbook.middleware.performance import PerformanceMiddleware
from clinicbook.schemas.common import ErrorEnvelope
import clinicbook.models  # noqa: F401  register tables on Base.metadata

# Configure logging
log_handlers = [logging.StreamHandler(sys.stdout)]
if settings.LOG_FILE:
    log_handlers.append(logging.FileHandler(settings.LOG_FILE))

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=log_handlers
)

logger = logging.getLogger(__name__)


def _envelope_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(message=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting up ClinicBook backend...")

    # Check database tables
    try:
        from sqlalchemy import inspect

        with get_db_session() as db:
            inspector = inspect(db.bind)
            existing_tables = inspector.get_table_names()
            required_tables = [table.name for table in Base.metadata.tables.values()]
            missing_tables = [table for table in required_tables if table not in existing_tables]

            if missing_tables:
                logger.warning(f"Missing database tables: {missing_tables}")
                logger.warning("Run the migrations before starting the server: alembic upgrade head")
            else:
                logger.info("All required database tables exist")
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")

    # Verify S3 configuration and access
    if settings.USE_S3_UPLOADS:
        try:
            from clinicbook.api.deps import get_blob_store

            ok, msg = get_blob_store().verify(require_write=False)
            if ok:
                logger.info(f"[Startup] S3 check: {msg}")
            else:
                logger.warning(f"[Startup] S3 check failed: {msg}")
        except Exception as e:
            logger.error(f"[Startup] S3 verification error: {e}")
    else:
        logger.info(f"[Startup] Storing uploads locally under {settings.UPLOADS_LOCAL_DIR}")

    yield

    # Shutdown
    logger.info("Shutting down ClinicBook backend...")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="ClinicBook - Doctor appointment booking, payments and patient reports",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan
    )

    # CORS Middleware - Environment-specific origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured for {settings.ENVIRONMENT} environment with origins: {settings.allowed_cors_origins}")

    # GZip Middleware for response compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Request timing middleware
    app.add_middleware(PerformanceMiddleware)

    from clinicbook.api.v1.api import api_router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint that redirects to API documentation"""
        return RedirectResponse(url=f"{settings.API_V1_STR}/docs")

    @app.get("/health", tags=["Health Check"])
    def health_check():
        """Health check endpoint"""
        db_status = "healthy" if check_database_connection() else "unhealthy"
        return {
            "success": True,
            "status": "healthy",
            "version": settings.VERSION,
            "project": settings.PROJECT_NAME,
            "database": db_status,
            "storage": "s3" if settings.USE_S3_UPLOADS else "local",
        }

    @app.exception_handler(ClinicBookError)
    async def clinicbook_exception_handler(request: Request, exc: ClinicBookError):
        """Domain errors raised by the service layer"""
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message} - {request.url}")
        else:
            logger.info(f"{type(exc).__name__}: {exc.message} - {request.url}")
        return _envelope_error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Global HTTP exception handler"""
        logger.error(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
        response = _envelope_error(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies, query strings and path parameters"""
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ())[1:])
            messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        logger.info(f"Validation error: {messages} - {request.url}")
        return _envelope_error(422, "; ".join(messages) or "Invalid request")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled exceptions"""
        logger.error(f"Unhandled exception: {exc} - {request.url}", exc_info=exc)
        return _envelope_error(500, "Internal server error")

    return app

# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    uvicorn.run(
        "clinicbook.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )

"""
Main FastAPI application
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import json
import logging
import time

from auditforms.config.database import DatabaseConfig
from auditforms.config.settings import settings
from auditforms.services.container import Services, build_services
from auditforms.utils.errors import AppError

from auditforms.routes import auth, form, reference_data, submissions, upload

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the application; pass services to skip MongoDB and Google wiring"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown events"""
        db_config = None
        if app.state.services is None:
            db_config = DatabaseConfig()
            await db_config.connect_db()
            app.state.services = build_services(db_config.database)
        logger.info("🚀 %s v%s started", settings.APP_NAME, settings.VERSION)
        yield
        if db_config is not None:
            await app.state.services.aclose()
            await db_config.close_db()
        logger.info("👋 Application shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        lifespan=lifespan
    )
    app.state.services = services

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("❌ %s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("⚠️ %s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Round-trip through json with default=str to handle non-serializable objects (e.g. ValueError)
        safe_errors = json.loads(json.dumps(exc.errors(), default=str))
        logger.warning(
            "❌ Validation error on %s %s: %s",
            request.method, request.url.path, json.dumps(safe_errors),
        )
        return JSONResponse(status_code=400, content={"error": "Invalid form data", "details": safe_errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("❌ Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info("🌐 %s %s", request.method, request.url.path)
        response = await call_next(request)
        duration = time.time() - start_time
        logger.info("✅ %s %s - %s (%.2fs)", request.method, request.url.path, response.status_code, duration)
        return response

    # Include routers
    app.include_router(form.router, prefix="/api")
    app.include_router(submissions.router, prefix="/api")
    app.include_router(upload.router, prefix="/api")
    app.include_router(reference_data.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "app": settings.APP_NAME,
            "version": settings.VERSION,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app


app = create_app()

"""Main FastAPI application"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from datetime import datetime, timezone
from pathlib import Path
import logging
import time
import uuid

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

from app.config import Settings, settings
from app.core.database import init_db, SessionLocal
from app.core.exceptions import BaseAPIException
from app.core.tokens import AccessTokenService
from app.schemas.response import ErrorResponse, HealthResponse
from app.services.metrics import FileserverMetrics
from app.api.routes import admin, auth, chirps, users

# Configure logging - ensure log directory exists
_log_dir = Path(settings.get_log_file()).parent
_log_dir.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.get_log_file()),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "chirpy_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "chirpy_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

FILESERVER_PREFIX = "/app"


def _error(status_code: int, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        """Handle custom API exceptions"""
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"API Exception: {exc.message}",
            extra={"status_code": exc.status_code, "path": request.url.path, "method": request.method},
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors"""
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning(
            f"Validation error: {errors}",
            extra={"path": request.url.path, "method": request.method}
        )
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", details=errors)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors"""
        logger.exception(
            f"Database error: {exc}",
            extra={"path": request.url.path, "method": request.method},
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.critical(
            f"Unhandled exception: {exc}",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong")


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the application.

    The signing secret is validated here, so a misconfigured process fails
    before serving a single request.
    """
    app_settings.validate_security_settings()

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        docs_url="/api/docs" if app_settings.DEBUG else None,
        redoc_url="/api/redoc" if app_settings.DEBUG else None
    )

    app.state.access_tokens = AccessTokenService(app_settings.JWT_SECRET, issuer=app_settings.JWT_ISSUER)
    app.state.fileserver_metrics = FileserverMetrics()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_headers_and_timing(request: Request, call_next):
        """Count fileserver hits, add request ids and record request metrics"""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        if request.url.path.startswith(FILESERVER_PREFIX + "/") or request.url.path == FILESERVER_PREFIX:
            app.state.fileserver_metrics.increment()

        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Request-ID"] = request_id

        REQUEST_COUNT.labels(request.method, request.url.path, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(request.method, request.url.path).observe(duration)

        if duration > 1.0:
            logger.warning(
                "Slow request: %s %s took %.2fs request_id=%s",
                request.method,
                request.url.path,
                duration,
                request_id,
            )

        return response

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup"""
        logger.info(f"Starting {app_settings.APP_NAME} v{app_settings.APP_VERSION}")
        logger.info(f"Environment: {app_settings.ENVIRONMENT} (platform: {app_settings.PLATFORM})")
        try:
            init_db()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {app_settings.APP_NAME}")

    @app.get("/api/healthz", response_class=PlainTextResponse)
    async def readiness():
        """Readiness probe"""
        return PlainTextResponse("OK")

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint including database reachability"""
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            db_ok = True
        except SQLAlchemyError as exc:
            logger.error(f"Health check database error: {exc}")
            db_ok = False
        finally:
            db.close()

        return HealthResponse(
            status="healthy" if db_ok else "degraded",
            version=app_settings.APP_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Include routers
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(chirps.router, prefix="/api/chirps", tags=["Chirps"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])

    app.mount(
        FILESERVER_PREFIX,
        StaticFiles(directory=app_settings.get_fileserver_root(), html=True, check_dir=False),
        name="fileserver",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )

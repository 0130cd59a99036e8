"""
Forms Portal Backend - Main Application
Request forms, approval workflow and dashboard API
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import logging
import uvicorn
from datetime import datetime, timezone

from config import Settings, get_settings
from database import Database
from services.errors import FormsError
from routes import (
    forms_router, dashboard_router, reports_router, admin_router, branches_router, leave_router
)

logger = logging.getLogger(__name__)

ERROR_KINDS = {
    400: "validation",
    404: "not_found",
    409: "conflict",
}


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def error_body(message: str, error_kind: str) -> dict:
    return {"success": False, "message": message, "errorKind": error_kind}


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(FormsError)
    async def forms_error_handler(request: Request, exc: FormsError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        kind = ERROR_KINDS.get(exc.status_code, "server_error" if exc.status_code >= 500 else "error")
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail), kind))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in exc.errors()
        )
        return JSONResponse(status_code=400, content=error_body(problems or "Invalid request", "validation"))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_body("Internal server error", "server_error"))


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Pass ``database`` to run against an existing handle (tests); otherwise one
    is built from settings when the lifespan starts.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 Forms Portal Backend Starting...")
        try:
            if app.state.database is None:
                app.state.database = Database.from_settings(settings)

            logger.info("📊 Initializing database...")
            app.state.database.init_db()

            logger.info("🔍 Testing database connection...")
            if app.state.database.test_connection():
                logger.info("✅ Database connection successful")
            else:
                logger.error("❌ Database connection failed")

            logger.info("✅ Backend startup completed successfully")
        except Exception as e:
            logger.error(f"❌ Startup error: {str(e)}")
            raise

        yield

        # Shutdown
        logger.info("🛑 Forms Portal Backend Shutting Down...")
        app.state.database.dispose()

    app = FastAPI(
        title="Forms Portal Backend API",
        description="Business request forms with approval workflow",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        db_status = app.state.database is not None and app.state.database.test_connection()
        body = {
            "status": "healthy" if db_status else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if db_status else "disconnected",
            "version": "1.0.0"
        }
        return JSONResponse(status_code=200 if db_status else 503, content=body)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Forms Portal Backend API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
            "health": "/health"
        }

    prefix = settings.API_PREFIX
    app.include_router(dashboard_router, prefix=f"{prefix}/dashboard", tags=["Dashboard"])
    app.include_router(admin_router, prefix=prefix, tags=["Admin"])
    app.include_router(branches_router, prefix=prefix, tags=["Branches & Departments"])
    app.include_router(leave_router, prefix=prefix, tags=["Leave"])
    app.include_router(reports_router, prefix=prefix, tags=["Reports"])
    app.include_router(forms_router, prefix=prefix)

    return app


configure_logging(get_settings().LOG_LEVEL)
app = create_app()

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower()
    )

"""
Main application file for the Quran Pro API
"""
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import configuration and initialize settings
from quranpro.config import settings, logger
from quranpro.database import ConnectionPool, DatabaseError, DatabaseManager
from quranpro.chat.completion import CompletionClient

# Import all routers
from quranpro.api import general_router
from quranpro.auth.endpoints import router as auth_router
from quranpro.users.endpoints import router as users_router
from quranpro.conversations.endpoints import router as conversations_router
from quranpro.chat.endpoints import router as chat_router
from quranpro.tracking.endpoints import router as tracking_router
from quranpro.notifications.endpoints import router as notifications_router
from quranpro.admin.endpoints import router as admin_router


def _error_body(detail: str, exc: Exception) -> dict:
    body = {"detail": detail}
    if settings.is_development():
        body["error"] = str(exc)
    return body


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})

    @app.exception_handler(DatabaseError)
    async def database_exception_handler(request: Request, exc: DatabaseError):
        logger.error("database_error", extra={"path": request.url.path, "error": str(exc)}, exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body("Database error", exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_error", extra={"path": request.url.path, "error": str(exc)}, exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body("Internal server error", exc))


def create_app(database: DatabaseManager = None, completion_client=None) -> FastAPI:
    """Create and configure the FastAPI application"""

    # Validate settings
    settings.validate()

    database = database or DatabaseManager(ConnectionPool.from_settings())
    completion_client = completion_client or CompletionClient()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db.open()
        logger.info("app_started", extra={"version": settings.VERSION, "environment": settings.ENVIRONMENT})
        try:
            yield
        finally:
            app.state.db.close()

    # Create FastAPI app
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Quran reading tracker with a quota-gated Islamic assistant chatbot",
        lifespan=lifespan,
    )
    app.state.db = database
    app.state.completion_client = completion_client

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info("http_request", extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        })
        return response

    register_exception_handlers(app)

    # Include routers
    app.include_router(general_router)        # Root and health
    app.include_router(auth_router)           # Google sign-in, token status, logout
    app.include_router(users_router)
    app.include_router(conversations_router)
    app.include_router(chat_router)
    app.include_router(tracking_router)       # Progress, history, favorites, goals, sessions, stats
    app.include_router(notifications_router)
    app.include_router(admin_router)

    return app


# Create the application instance
app = create_app()


def main():
    try:
        app.state.db.open()
    except DatabaseError as e:
        logger.error("startup_database_failed", extra={"error": str(e)})
        sys.exit(1)

    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()

"""
app/main.py

Purpose: Application entry point

- Builds the FastAPI app for the Gym Visa admin dashboard
- Opens the MongoDB connection and indexes on startup, closes it on shutdown
- Every /api route except file serving requires the admin session
- Health, readiness and liveness checks
- No business logic should be written here
"""

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import analytics, gyms, notifications, organizations, payouts, subscriptions, users
from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import LogContext, get_logger, setup_logging
from app.core.session import require_admin, session_for
from app.db.indexes import create_indexes
from app.db.mongo import Database

setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"
SLOW_REQUEST_SECONDS = 5.0

# (router, tag, admin only)
ROUTES = [
    (users.router, "Users", True),
    (organizations.router, "Organizations", True),
    (notifications.router, "Notifications", True),
    (gyms.router, "Gyms", True),
    (gyms.files_router, "Files", False),
    (analytics.router, "Analytics", True),
    (subscriptions.router, "Subscriptions", True),
    (payouts.router, "Payouts", True),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Gym Visa admin API...")
    database = Database()

    try:
        validate_settings()
        await database.connect()
        app.state.database = database
        await create_indexes(database)

        if not await database.check_health():
            logger.warning("⚠️ Database health check failed during startup")
        if not settings.ADMIN_EMAIL:
            logger.warning("⚠️ ADMIN_EMAIL is not set; every admin request will be rejected")
        if not settings.email_configured:
            logger.warning("⚠️ SMTP is not configured; organization credentials will not be emailed")

        logger.info(f"🎉 Gym Visa admin API started ({settings.ENVIRONMENT}, debug={settings.DEBUG})")
    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield

    logger.info("🛑 Shutting down Gym Visa admin API...")
    try:
        await database.close()
        logger.info("👋 MongoDB connection closed")
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="Gym Visa Admin API",
    description="Administration backend for the Gym Visa membership network",
    version=VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

add_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def admin_log_context(request: Request, call_next):
    """Tags request logs with the admin identity and reports slow requests."""
    session = session_for(request.headers.get("X-Admin-Email"))
    started = time.perf_counter()

    with LogContext(admin=session.identity or "anonymous"):
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning(f"Slow request: {request.method} {request.url.path} took {elapsed:.2f}s")

    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    return response


for router, tag, admin_only in ROUTES:
    app.include_router(
        router,
        prefix=settings.API_PREFIX,
        tags=[tag],
        dependencies=[Depends(require_admin)] if admin_only else [],
    )


async def _database_healthy(request: Request) -> bool:
    database = getattr(request.app.state, "database", None)
    if database is None:
        return False
    try:
        return await database.check_health()
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


@app.get("/", tags=["Health"])
async def root():
    return {
        "name": "Gym Visa Admin API",
        "version": VERSION,
        "status": "running",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Database connectivity plus whether the email and push gateways are
    configured. Returns 503 when the database is unreachable.
    """
    db_healthy = await _database_healthy(request)
    checks = {
        "database": "healthy" if db_healthy else "unhealthy",
        "email": "configured" if settings.email_configured else "not_configured",
        "push": "configured" if settings.push_configured else "not_configured",
    }
    return JSONResponse(
        status_code=200 if db_healthy else 503,
        content={
            "status": "healthy" if db_healthy else "degraded",
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "checks": checks,
        },
    )


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """Ready once the database answers."""
    if await _database_healthy(request):
        return {"status": "ready"}
    return JSONResponse(status_code=503, content={"status": "not_ready", "reason": "database_unavailable"})


@app.get("/live", tags=["Health"])
async def liveness_check():
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )

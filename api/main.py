"""
Mesob Marketplace - Main FastAPI Application.

REST API for the producer marketplace: catalog, orders, Chapa payments,
producer payouts, disputes and notifications.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from api.dependencies import get_session_factory, reset_dependencies
from api.routes import (
    auth,
    bank_accounts,
    disputes,
    health,
    notifications,
    orders,
    payments,
    payouts,
    products,
    reviews,
)
from core.application.services import UserApplicationService
from core.domain.exceptions import MarketplaceError
from core.infrastructure.database.config import close_database, get_engine, init_database
from core.infrastructure.logging import configure_logging
from core.settings import get_app_settings


settings = get_app_settings()

# Setup logging
configure_logging(settings.server.log_level)
logger = logging.getLogger(__name__)


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Mesob Marketplace API",
    description="""
    Marketplace backend for local producers.

    Features:
    - Product catalog with co-producer revenue shares
    - Orders with stock reservation and per-producer commission splits
    - Chapa hosted checkout and signed webhooks
    - Weekly producer payout batches
    - Disputes with refunds
    - In-app notifications
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(MarketplaceError)
async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "path": request.url.path},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning(f"ValueError on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "path": request.url.path},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "path": request.url.path},
    )


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Create tables and the bootstrap admin account."""
    logger.info("🚀 Mesob Marketplace API starting up...")

    app_settings = get_app_settings()
    await init_database(get_engine(app_settings.database))

    if app_settings.auth.admin_email and app_settings.auth.admin_password:
        users = UserApplicationService(get_session_factory(), app_settings.auth)
        created = await users.ensure_admin(
            app_settings.auth.admin_email,
            app_settings.auth.admin_password,
            app_settings.auth.admin_name,
        )
        if created:
            logger.info(f"👤 Created admin account {app_settings.auth.admin_email}")

    logger.info("📚 Swagger UI available at: /docs")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    await close_database()
    reset_dependencies()
    logger.info("👋 Mesob Marketplace API shutting down...")


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(reviews.router, prefix="/api/v1/reviews", tags=["Reviews"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])
app.include_router(payouts.router, prefix="/api/v1/payouts", tags=["Payouts"])
app.include_router(bank_accounts.router, prefix="/api/v1/bank-accounts", tags=["Bank Accounts"])
app.include_router(disputes.router, prefix="/api/v1/disputes", tags=["Disputes"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Mesob Marketplace API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)

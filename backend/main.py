"""
Storefront Payment Bridge — FastAPI Application

Email-verification lookups against Firebase Authentication, Midtrans Snap
transaction tokens, and payment notifications written back to the order store.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from domain.enums import OrderStoreBackend
from domain.errors import DomainError
from domain.responses import error_body
from routes import health, identity, payments

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings, build SDK clients, create tables. Shutdown: release them."""
    settings.validate_production_settings()

    from firebase_client import FirebaseClient
    from midtrans_client import create_snap
    from services.payment_service import PaymentGateway

    firebase = None
    if settings.firebase_configured:
        firebase = FirebaseClient(settings)
        firebase.initialize()
    else:
        logger.warning("Firebase credentials not set; identity lookups disabled")
    app.state.firebase = firebase

    app.state.payment_gateway = PaymentGateway(
        create_snap(settings),
        timeout=settings.upstream_timeout_seconds,
    )

    if settings.order_store_backend == OrderStoreBackend.SQL.value:
        from database import init_db
        await init_db()
        logger.info("Database initialized")

    yield  # app runs here

    if firebase is not None:
        firebase.close()

    from services.async_executor import shutdown_executor
    shutdown_executor()

    logger.info("Shutting down")


# ── App Factory ─────────────────────────────────────────────────────

app = FastAPI(
    title="Storefront Payment Bridge API",
    description="Firebase email verification and Midtrans Snap payments for the storefront",
    version="3.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE"],
    allow_headers=["X-Requested-With", "content-type"],
)

# ── Routes ──────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(identity.router)
app.include_router(payments.router)


# ── Exception Handlers ──────────────────────────────────────────────


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Catch-all for unhandled exceptions.

    Never return raw exception details to clients; the traceback is logged.
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_body(500, "Internal server error"),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """
    Flatten HTTPException responses into the storefront's error body.

    DomainErrors choose their own message key; plain HTTPExceptions use error_message.
    """
    if isinstance(exc, DomainError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.message, exc.message_key),
        )

    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")

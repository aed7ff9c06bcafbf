"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads secrets, configuration and logging
- Builds the adapters and injects them into the state machine
- Registers API routes (webhook, subscription admin)
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings, reload_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.core.secrets import load_secrets_into_environment
from app.db.mongo import (
    connect_to_mongo,
    close_mongo_connection,
    check_database_health,
    get_subscriptions_collection,
)
from app.db.indexes import create_indexes
from app.flow.context import FlowContext
from app.flow.dispatcher import CommandDispatcher
from app.flow.machine import SubscriptionStateMachine
from app.flow.replies import ReplyRegistry
from app.services.chat_gateway import ChatGateway
from app.services.notification_service import NotificationService
from app.services.quote_service import QuoteService
from app.services.subscription_store import SubscriptionStore
from app.api import webhook, subscriptions

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


def build_services(app: FastAPI) -> None:
    """
    Constructs every adapter once and wires them into app.state.
    """
    replies = ReplyRegistry()
    gateway = ChatGateway(
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        whatsapp_number=settings.TWILIO_WHATSAPP_NUMBER,
        replies=replies,
    )
    quotes = QuoteService(settings.QUOTE_API_URL, timeout=settings.QUOTE_API_TIMEOUT)

    ctx = FlowContext(
        store=SubscriptionStore(get_subscriptions_collection()),
        notifier=NotificationService(region=settings.AWS_REGION),
        quotes=quotes,
        gateway=gateway,
        topic_arn=settings.SNS_TOPIC_ARN,
    )
    machine = SubscriptionStateMachine(
        ctx,
        serialize_user_mutations=settings.SERIALIZE_USER_MUTATIONS
    )

    app.state.replies = replies
    app.state.gateway = gateway
    app.state.quotes = quotes
    app.state.machine = machine
    app.state.dispatcher = CommandDispatcher(machine, replies)

    if not gateway.is_configured():
        logger.warning("Twilio is not configured; chat messages cannot be delivered")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting InspireBot...")

    try:
        # A secret failure is fatal: nothing below can work without it
        if load_secrets_into_environment(settings.AWS_SECRET_ID, settings.AWS_REGION):
            reload_settings()

        validate_settings()
        logger.info("Configuration validated")

        await connect_to_mongo()
        await create_indexes()

        build_services(app)

        logger.info(f"InspireBot started (environment={settings.ENVIRONMENT}, debug={settings.DEBUG})")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("Shutting down InspireBot...")

    try:
        await app.state.dispatcher.shutdown()
        await app.state.gateway.close()
        await app.state.quotes.close()
        await close_mongo_connection()
        logger.info("InspireBot shut down")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


# Create FastAPI app with lifespan
app = FastAPI(
    title="InspireBot",
    description="WhatsApp inspirational quotes with optional SMS delivery",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(f"Slow request detected: {request.method} {request.url.path} ({process_time:.2f}s)")

    return response


add_exception_handlers(app)

app.include_router(webhook.router, prefix=settings.API_PREFIX, tags=["Webhook"])
app.include_router(subscriptions.router, prefix=settings.API_PREFIX, tags=["Subscriptions"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "InspireBot API",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Checks database connectivity and service status.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {}
    }

    db_healthy = await check_database_health()
    health_status["checks"]["database"] = "healthy" if db_healthy else "unhealthy"
    if not db_healthy:
        health_status["status"] = "degraded"

    dispatcher = getattr(app.state, "dispatcher", None)
    health_status["checks"]["running_commands"] = dispatcher.pending_tasks if dispatcher else 0

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if await check_database_health() and getattr(app.state, "dispatcher", None) is not None:
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "startup_incomplete"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
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

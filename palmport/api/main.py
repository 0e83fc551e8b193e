"""PalmPort FastAPI application: entry point.

Start with:
    uvicorn palmport.api.main:app --reload --host 0.0.0.0 --port 8000

Required env: DATABASE_URL, JWT_SECRET. Mail, Paystack and Cloudinary
settings are optional at startup; features that need them fail per request
with a configuration error instead.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from palmport.api.errors import register_exception_handlers
from palmport.api.routers import admin, auth, batches, cart, orders, payments, products, shipping, subscribe
from palmport.config import (
    AppConfig,
    load_app_config,
    load_auth_config,
    load_cloudinary_config,
    load_database_config,
    load_mail_config,
    load_paystack_config,
)
from palmport.core.logger import configure as configure_logging
from palmport.infra.database.engine import (
    build_engine,
    build_session_factory,
    ensure_database_exists,
    init_db,
)
from palmport.integrations.cloudinary import CloudinaryUploader
from palmport.integrations.mailer import SmtpMailer
from palmport.integrations.paystack import PaystackClient
from palmport.services.auth_service import AuthService
from palmport.services.dispatcher import BackgroundDispatcher
from palmport.services.notifications import NotificationGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure_logging()

    db_config = load_database_config()
    await ensure_database_exists(db_config)
    engine = build_engine(db_config)
    await init_db(engine)
    session_factory = build_session_factory(engine)
    app.state.engine = engine
    app.state.session_factory = session_factory
    logger.info("API: database ready")

    app_config: AppConfig = app.state.app_config
    auth_config = load_auth_config()
    mail_config = load_mail_config()
    cloudinary_config = load_cloudinary_config()
    app.state.auth_config = auth_config
    app.state.notifications = NotificationGateway(
        SmtpMailer(mail_config),
        admin_email=mail_config.admin_email,
        app_base_url=app_config.app_base_url,
    )
    app.state.payments = PaystackClient(load_paystack_config())
    app.state.image_uploader = CloudinaryUploader(cloudinary_config) if cloudinary_config.is_configured else None
    if app.state.image_uploader is None:
        logger.warning("API: Cloudinary not configured; image uploads disabled")
    dispatcher = BackgroundDispatcher()
    app.state.dispatcher = dispatcher

    async with session_factory() as session:
        await AuthService(session, auth_config).ensure_admin_exists()
        await session.commit()
    logger.info("API: ready (strict transitions=%s)", app_config.strict_transitions)

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await dispatcher.drain()
    await engine.dispose()
    logger.info("API: engine disposed")


def create_app(app_config: Optional[AppConfig] = None, *, with_lifespan: bool = True) -> FastAPI:
    """Build the application; tests pass ``with_lifespan=False`` and fill ``app.state`` themselves."""
    app_config = app_config or load_app_config()
    app = FastAPI(
        title="PalmPort API",
        version="1.0.0",
        description="Storefront, order lifecycle and batch traceability API for PalmPort.",
        lifespan=lifespan if with_lifespan else None,
    )
    app.state.app_config = app_config

    limiter = Limiter(key_func=get_remote_address, default_limits=[app_config.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(app_config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for module in (orders, payments, cart, subscribe, shipping, products, batches, auth, admin):
        app.include_router(module.router, prefix="/api")

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

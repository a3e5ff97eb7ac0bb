"""
FastAPI application entry point - session credential API
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from config.settings import DEFAULT_SECRET_KEY, settings
from sessiongate.api.errors import register_exception_handlers
from sessiongate.api.routes_auth import router as auth_router
from sessiongate.api.routes_user import router as user_router, admin_router
from sessiongate.auth.middleware import AuthenticationMiddleware
from sessiongate.log import get_logger
from sessiongate.observability import setup_observability

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables -> secret key check -> purge expired refresh tokens -> log cleanup"""

    from sessiongate.db.engine import init_db
    try:
        init_db()
    except Exception as e:
        logger.warning("[startup] init_db failed (may be OK if alembic already ran): %s", e)

    if settings.uses_default_secret:
        logger.warning(
            "[startup] SECURITY WARNING: auth.secret_key is still set to the default value '%s'. "
            "All JWT tokens can be trivially forged. "
            "Set SESSIONGATE_SECRET_KEY or auth.secret_key in config/app_config.local.json "
            "before deploying to production.",
            DEFAULT_SECRET_KEY,
        )

    try:
        from sessiongate.auth.refresh_store import RefreshTokenStore
        purged = RefreshTokenStore().purge_expired()
        if purged:
            logger.info("[startup] purged %d expired refresh token(s)", purged)
    except Exception as e:
        logger.warning("[startup] purge of expired refresh tokens failed: %s", e)

    from sessiongate.log import cleanup_logs
    report = cleanup_logs()
    if report["deleted_by_age"] or report["deleted_by_size"]:
        logger.info(
            "[startup] log cleanup removed %d file(s), %.1f MB remaining",
            len(report["deleted_by_age"]) + len(report["deleted_by_size"]),
            report["remaining_mb"],
        )

    yield


def create_app(authenticator_factory=None) -> FastAPI:
    """Build the application. *authenticator_factory* defaults to one bound to the app database."""
    app = FastAPI(
        title="sessiongate",
        description="Session credential issuance, verification and revocation",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(admin_router)

    app.add_middleware(AuthenticationMiddleware, authenticator_factory=authenticator_factory)
    setup_observability(app)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

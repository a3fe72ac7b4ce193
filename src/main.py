from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from src.config import Settings, get_settings
from src.db.core import Database
from src.error_handlers import register_error_handlers
from src.logging_config import get_logger, setup_logging
from src.middleware import AccessLogMiddleware
from src.models.common import ErrorResponse
from src.services.auth import TokenService
from .routers.accounts import router as accounts_router
from .routers.auth import router as auth_router
from .routers.budgets import router as budgets_router
from .routers.categories import router as categories_router
from .routers.goals import router as goals_router
from .routers.health import router as health_router
from .routers.investments import router as investments_router
from .routers.notifications import router as notifications_router
from .routers.transactions import router as transactions_router

logger = get_logger(__name__)

# Documented on every resource route; the body is always the error envelope
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)}


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the API.

    The caller may hand in its own Settings and Database (tests do);
    otherwise both come from the environment. A database built here is
    disposed on shutdown.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    owns_database = database is None
    database = database or Database.from_settings(settings)
    if settings.db_create_all:
        database.create_all()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info(f"Pocket Ledger API starting ({settings.environment})")
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(title="Pocket Ledger API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.token_service = TokenService.from_settings(settings)

    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)

    register_error_handlers(app)

    app.include_router(health_router)
    for router in (auth_router, accounts_router, categories_router, transactions_router,
                   budgets_router, goals_router, investments_router, notifications_router):
        app.include_router(router, responses=ERROR_RESPONSES)

    return app


app = create_app()

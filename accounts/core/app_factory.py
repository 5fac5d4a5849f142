from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..application.services.backoffice_service import BackofficeService
from ..application.services.item_service import ItemService
from ..application.services.token_service import TokenService
from ..application.services.user_service import UserService
from ..domain.exceptions import AccountsError
from ..domain.models.user import Clock, utcnow
from ..domain.ports.notifications import Mailer
from ..infrastructure.persistence.sqlite import SQLiteDatabase
from ..infrastructure.repositories.item_repository import SQLiteItemRepository
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..presentation.api.errors import accounts_error_handler
from ..presentation.api.routers import admin as admin_router
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import items as items_router
from ..presentation.api.routers import users as users_router
from ..services.email_service import EmailService
from ..services.event_publisher import LoggingEventPublisher

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    *,
    mailer: Optional[Mailer] = None,
    clock: Clock = utcnow,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title=settings.app_name, lifespan=_create_lifespan(settings, mailer, clock))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AccountsError, accounts_error_handler)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(admin_router.router)
    app.include_router(items_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings, mailer: Optional[Mailer], clock: Clock):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        database = SQLiteDatabase(settings.database_path)
        users = SQLiteUserRepository(database, clock=clock)
        items = SQLiteItemRepository(database, clock=clock)
        publisher = LoggingEventPublisher()
        if mailer is None:
            email_service: Mailer = EmailService(
                base_url=settings.frontend_base_url,
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                smtp_username=settings.smtp_username,
                smtp_password=settings.smtp_password,
                from_email=settings.smtp_from_email,
                from_name=settings.app_name,
            )
        else:
            email_service = mailer

        token_service = TokenService(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_minutes=settings.jwt_expiration_minutes,
        )
        auth_service = AuthService(
            users,
            token_service,
            email_service,
            publisher,
            skip_email_verification=settings.skip_email_verification,
            auto_activate_users=settings.auto_activate_users,
            clock=clock,
        )
        backoffice_service = BackofficeService(users, publisher, clock=clock)
        backoffice_service.ensure_default_admin(
            settings.admin_default_email,
            settings.admin_default_password,
            settings.admin_default_name,
        )

        container = ApplicationContainer(
            settings=settings,
            database=database,
            token_service=token_service,
            auth_service=auth_service,
            user_service=UserService(users, publisher),
            backoffice_service=backoffice_service,
            item_service=ItemService(items, clock=clock),
        )
        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Accounts service started with database %s", settings.database_path)

        try:
            yield
        finally:
            database.close()

    return lifespan

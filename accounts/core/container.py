from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.backoffice_service import BackofficeService
from ..application.services.item_service import ItemService
from ..application.services.token_service import TokenService
from ..application.services.user_service import UserService
from ..infrastructure.persistence.sqlite import SQLiteDatabase
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    database: SQLiteDatabase
    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    backoffice_service: BackofficeService
    item_service: ItemService

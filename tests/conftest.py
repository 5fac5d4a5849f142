"""
Shared test fixtures and configuration for pytest.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List, Tuple

import pytest
from fastapi.testclient import TestClient

from accounts.application.services.auth_service import AuthService
from accounts.application.services.backoffice_service import BackofficeService
from accounts.application.services.item_service import ItemService
from accounts.application.services.token_service import TokenService
from accounts.application.services.user_service import UserService
from accounts.core.app_factory import create_application
from accounts.core.config import Settings
from accounts.domain.models import User, UserRole
from accounts.infrastructure.persistence.sqlite import SQLiteDatabase
from accounts.infrastructure.repositories.item_repository import SQLiteItemRepository
from accounts.infrastructure.repositories.user_repository import SQLiteUserRepository

STRONG_PASSWORD = "Str0ng!Pass"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Adm1n!Pass"
TEST_SECRET = "test-secret-key-for-testing-only"

_ENV_KEYS = (
    "DATABASE_PATH",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "JWT_EXPIRATION_MINUTES",
    "SKIP_EMAIL_VERIFICATION",
    "AUTO_ACTIVATE_USERS",
    "ADMIN_EMAIL",
    "ADMIN_PASSWORD",
    "ADMIN_NAME",
    "FRONTEND_BASE_URL",
    "CORS_ALLOW_ORIGINS",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_FROM_EMAIL",
)


class FakeClock:
    """Controllable clock passed wherever the code takes a ``clock`` callable."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingMailer:
    def __init__(self) -> None:
        self.verification_emails: List[Tuple[str, str]] = []
        self.reset_emails: List[Tuple[str, str]] = []

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        self.verification_emails.append((to_email, verification_token))
        return True

    def send_password_reset_email(self, to_email: str, reset_token: str) -> bool:
        self.reset_emails.append((to_email, reset_token))
        return True


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, events) -> None:
        self.events.extend(events)

    @property
    def names(self) -> List[str]:
        return [event.name for event in self.events]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def database(tmp_path) -> Iterator[SQLiteDatabase]:
    db = SQLiteDatabase(tmp_path / "accounts.db")
    yield db
    db.close()


@pytest.fixture
def user_repository(database, clock) -> SQLiteUserRepository:
    return SQLiteUserRepository(database, clock=clock)


@pytest.fixture
def item_repository(database, clock) -> SQLiteItemRepository:
    return SQLiteItemRepository(database, clock=clock)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_SECRET, expiration_minutes=60)


@pytest.fixture
def make_auth_service(user_repository, token_service, mailer, publisher, clock) -> Callable[..., AuthService]:
    def factory(*, skip_email_verification: bool = False, auto_activate_users: bool = True) -> AuthService:
        return AuthService(
            user_repository,
            token_service,
            mailer,
            publisher,
            skip_email_verification=skip_email_verification,
            auto_activate_users=auto_activate_users,
            clock=clock,
        )

    return factory


@pytest.fixture
def auth_service(make_auth_service) -> AuthService:
    return make_auth_service()


@pytest.fixture
def user_service(user_repository, publisher) -> UserService:
    return UserService(user_repository, publisher)


@pytest.fixture
def backoffice_service(user_repository, publisher, clock) -> BackofficeService:
    return BackofficeService(user_repository, publisher, clock=clock)


@pytest.fixture
def item_service(item_repository, clock) -> ItemService:
    return ItemService(item_repository, clock=clock)


@pytest.fixture
def make_user(clock) -> Callable[..., User]:
    """Build an in-memory user with a password set."""

    def factory(
        email: str = "jane@example.com",
        name: str = "Jane",
        *,
        verified: bool = True,
        active: bool = True,
        role: UserRole = UserRole.USER,
        password: str = STRONG_PASSWORD,
    ) -> User:
        user = User.register(email, name, is_email_verified=verified, is_active=active, role=role, clock=clock)
        if password:
            user.set_password(password)
        return user

    return factory


@pytest.fixture
def clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings(clean_env, monkeypatch, tmp_path) -> Settings:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("AUTO_ACTIVATE_USERS", "true")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    return Settings()


@pytest.fixture
def client(settings, mailer) -> Iterator[TestClient]:
    app = create_application(settings, mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client) -> dict:
    return auth_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def register_verified(client, mailer) -> Callable[..., dict]:
    """Register through the API, redeem the mailed token and return auth headers."""

    def factory(email: str = "jane@example.com", name: str = "Jane", password: str = STRONG_PASSWORD) -> dict:
        response = client.post("/api/auth/register", json={"email": email, "name": name, "password": password})
        assert response.status_code == 201, response.text
        token = mailer.verification_emails[-1][1]
        assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 200
        return auth_headers(client, email, password)

    return factory


@pytest.fixture
def login(client) -> Callable[[str, str], dict]:
    return lambda email, password: auth_headers(client, email, password)

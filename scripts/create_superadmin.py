import getpass
import os

from dotenv import load_dotenv

from accounts.application.services.backoffice_service import BackofficeService
from accounts.core.config import Settings
from accounts.core.logging import configure_logging
from accounts.domain.models import Password
from accounts.infrastructure.persistence.sqlite import SQLiteDatabase
from accounts.infrastructure.repositories.user_repository import SQLiteUserRepository
from accounts.services.event_publisher import LoggingEventPublisher


def main() -> None:
    load_dotenv()
    configure_logging()
    settings = Settings()

    email = os.getenv("ADMIN_EMAIL") or input("Administrator email: ").strip()
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Administrator password: ")
    Password.validate(password)

    database = SQLiteDatabase(settings.database_path)
    try:
        backoffice = BackofficeService(SQLiteUserRepository(database), LoggingEventPublisher())
        user = backoffice.ensure_default_admin(email, password, settings.admin_default_name)
    finally:
        database.close()

    print("Super administrator ready:", user.email if user else email)


if __name__ == "__main__":
    main()

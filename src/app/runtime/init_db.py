"""Database initialization script."""

from src.app.api.utils.app_startup import configure_logging
from src.app.core.services import DbManageService, DbSessionService
from src.app.core.storage import AttachmentStore
from src.app.runtime.context import get_config


def init_db() -> None:
    """Create all database tables and the attachment directory."""
    config = get_config()
    database = DbSessionService()
    try:
        DbManageService(database, AttachmentStore(config.attachments)).create_all()
    finally:
        database.dispose()


if __name__ == "__main__":
    configure_logging()
    init_db()

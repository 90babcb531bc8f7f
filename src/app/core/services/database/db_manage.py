"""Schema and storage bootstrap."""

from loguru import logger
from sqlmodel import SQLModel

from src.app.core.services.database.db_session import DbSessionService
from src.app.core.storage.attachment_store import AttachmentStore


class DbManageService:
    def __init__(self, database: DbSessionService, attachments: AttachmentStore):
        self._database = database
        self._attachments = attachments

    def create_all(self) -> None:
        """Create all database tables and the attachment directory."""
        from src.app.entities.service.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._database.engine)
        root = self._attachments.ensure_root()
        logger.info("Database initialized with tables; attachments stored in {}", root)

"""Book service: the single entry point for owner-scoped book operations."""

from typing import Any

from loguru import logger
from pydantic import BaseModel

from src.app.core.errors import BookNotFoundError, BookValidationError
from src.app.core.services.attachment import AttachmentManager
from src.app.core.services.book.validation import (
    validate_book_changes,
    validate_new_book,
)
from src.app.core.storage.attachment_store import AttachmentStream
from src.app.entities.service.book import Book, BookRepository, BookStatus


class LibraryStats(BaseModel):
    """Per-owner counts shown on the dashboard."""

    total: int
    reading: int
    completed: int
    wishlist: int
    with_attachment: int
    attachment_bytes: int


class BookService:
    """Validates input and enforces ownership before touching storage.

    Every method takes the requesting owner's id first. A book owned by someone
    else raises ``BookNotFoundError`` exactly like a missing one.
    """

    def __init__(self, repository: BookRepository, attachments: AttachmentManager) -> None:
        self._repository = repository
        self._attachments = attachments

    def _require(self, owner_id: str, book_id: str) -> Book:
        book = self._repository.get(book_id, owner_id)
        if book is None:
            raise BookNotFoundError()
        return book

    def list_books(
        self,
        owner_id: str,
        status: BookStatus | None = None,
        has_attachment: bool | None = None,
    ) -> list[Book]:
        return self._repository.list_all(owner_id, status=status, has_attachment=has_attachment)

    def get_book(self, owner_id: str, book_id: str) -> Book:
        return self._require(owner_id, book_id)

    def create_book(self, owner_id: str, fields: Any) -> Book:
        outcome = validate_new_book(fields)
        if not outcome.ok:
            raise BookValidationError(outcome.errors)

        book = self._repository.create(owner_id, outcome.value)
        logger.info("Book {} created", book.id)
        return book

    def update_book(self, owner_id: str, book_id: str, fields: Any) -> Book:
        outcome = validate_book_changes(fields)
        if not outcome.ok:
            raise BookValidationError(outcome.errors)

        book = self._repository.update(book_id, owner_id, outcome.value)
        if book is None:
            raise BookNotFoundError()
        logger.info("Book {} updated", book.id)
        return book

    def delete_book(self, owner_id: str, book_id: str) -> None:
        """Delete a book, removing its attachment first.

        The record is the only handle on the stored file, so the attachment is
        detached before the record goes away.
        """
        book = self._require(owner_id, book_id)
        if book.has_attachment:
            self._attachments.detach(book)

        if not self._repository.delete(book_id, owner_id):
            raise BookNotFoundError()
        logger.info("Book {} deleted", book_id)

    def upload_attachment(
        self,
        owner_id: str,
        book_id: str,
        data: bytes,
        mime_type: str | None,
        filename: str | None = None,
    ) -> Book:
        book = self._require(owner_id, book_id)
        return self._attachments.attach(book, data, mime_type, filename=filename)

    def download_attachment(self, owner_id: str, book_id: str) -> tuple[Book, AttachmentStream]:
        book = self._require(owner_id, book_id)
        return book, self._attachments.retrieve(book)

    def remove_attachment(self, owner_id: str, book_id: str) -> Book:
        book = self._require(owner_id, book_id)
        return self._attachments.detach(book)

    def library_stats(self, owner_id: str) -> LibraryStats:
        counts = self._repository.count_by_status(owner_id)
        with_attachment, attachment_bytes = self._repository.attachment_totals(owner_id)
        return LibraryStats(
            total=sum(counts.values()),
            reading=counts[BookStatus.READING],
            completed=counts[BookStatus.COMPLETED],
            wishlist=counts[BookStatus.WISHLIST],
            with_attachment=with_attachment,
            attachment_bytes=attachment_bytes,
        )

"""Lifecycle of the single optional file attached to a book."""

from loguru import logger

from src.app.core.errors import (
    BookNotFoundError,
    ConcurrentModification,
    StorageInconsistency,
)
from src.app.core.storage.attachment_store import AttachmentStore, AttachmentStream
from src.app.entities.service.book import Attachment, Book, BookRepository


class AttachmentManager:
    """Keeps a book's attachment metadata and the file on disk in step.

    Metadata commits are conditioned on the version of the record the caller
    read, so two racing uploads cannot leave metadata pointing at a file the
    other one removed.
    """

    def __init__(self, repository: BookRepository, store: AttachmentStore) -> None:
        self._repository = repository
        self._store = store

    def attach(
        self,
        book: Book,
        data: bytes,
        declared_mime_type: str | None,
        filename: str | None = None,
    ) -> Book:
        """Store ``data`` as the book's attachment, replacing any previous file.

        Raises:
            UnsupportedMediaType: declared type is not accepted (nothing written)
            PayloadTooLarge: data exceeds the configured limit (nothing written)
            StorageIOError: the file could not be written
            ConcurrentModification: the record changed since ``book`` was read
        """
        self._store.check_upload(len(data), declared_mime_type)

        storage_path = self._store.new_storage_path(filename)
        size_bytes = self._store.write(storage_path, data)
        attachment = Attachment(present=True, storage_path=storage_path, size_bytes=size_bytes)

        try:
            updated = self._repository.update_attachment(
                book.id, book.owner_id, attachment, expected_version=book.version
            )
        except Exception:
            self._store.remove_quietly(storage_path)
            raise

        if updated is None:
            self._store.remove_quietly(storage_path)
            raise ConcurrentModification(
                f"Book {book.id} changed while the upload was stored; upload discarded"
            )

        previous = book.attachment
        if previous.present and previous.storage_path != storage_path:
            self._store.remove_quietly(previous.storage_path)

        logger.info(
            "Attached {} bytes to book {} as {}", size_bytes, book.id, storage_path
        )
        return updated

    def detach(self, book: Book) -> Book:
        """Clear the attachment and remove its file; a no-op when nothing is attached."""
        if not book.attachment.present:
            return book

        updated = self._repository.update_attachment(
            book.id, book.owner_id, Attachment.absent(), expected_version=book.version
        )
        if updated is None:
            current = self._repository.get(book.id, book.owner_id)
            if current is None:
                raise BookNotFoundError()
            if not current.attachment.present:
                return current
            raise ConcurrentModification(
                f"Book {book.id} changed while its attachment was being removed"
            )

        self._store.remove_quietly(book.attachment.storage_path)
        logger.info("Detached attachment {} from book {}", book.attachment.storage_path, book.id)
        return updated

    def retrieve(self, book: Book) -> AttachmentStream:
        """Open the attached file.

        Raises:
            BookNotFoundError: the book has no attachment
            StorageInconsistency: metadata claims a file that is missing or truncated
        """
        if not book.attachment.present:
            raise BookNotFoundError("No attachment for this book")

        stream = self._store.open_stream(
            book.attachment.storage_path, book.attachment.size_bytes
        )
        if stream is None:
            logger.error(
                "Attachment {} of book {} is missing or has the wrong size",
                book.attachment.storage_path,
                book.id,
            )
            raise StorageInconsistency(book.id, book.attachment.storage_path)
        return stream

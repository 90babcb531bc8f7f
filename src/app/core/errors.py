"""Domain errors raised by the book services.

The HTTP layer maps each of these onto a status code; nothing below the
router raises ``HTTPException``.
"""


class BookServiceError(Exception):
    """Base class for all book service failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BookValidationError(BookServiceError, ValueError):
    """Input failed validation; the caller can correct it and retry."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid book data")
        self.errors = errors


class BookNotFoundError(BookServiceError, LookupError):
    """No such book for this owner (never distinguished from "forbidden")."""

    def __init__(self, message: str = "Book not found") -> None:
        super().__init__(message)


class StorageInconsistency(BookNotFoundError):
    """Metadata says an attachment is present but the file is missing or truncated."""

    def __init__(self, book_id: str, storage_path: str) -> None:
        super().__init__("Attachment file not found")
        self.book_id = book_id
        self.storage_path = storage_path


class UnsupportedMediaType(BookServiceError):
    """Declared content type is not one of the accepted attachment types."""


class PayloadTooLarge(BookServiceError):
    """Upload is larger than the configured attachment limit."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(f"File of {size_bytes} bytes exceeds the {limit_bytes} byte limit")
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class StorageIOError(BookServiceError):
    """Writing or reading an attachment file failed."""


class ConcurrentModification(BookServiceError):
    """The record changed between read and conditional write."""


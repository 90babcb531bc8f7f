"""Entity package: Book."""

from .entity import Attachment, Book, BookStatus
from .repository import BookRepository
from .schemas import BookChanges, BookDraft
from .table import BookTable

__all__ = [
    "Attachment",
    "Book",
    "BookChanges",
    "BookDraft",
    "BookRepository",
    "BookStatus",
    "BookTable",
]

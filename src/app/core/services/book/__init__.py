from .book_service import BookService, LibraryStats
from .validation import ValidationOutcome, validate_book_changes, validate_new_book

__all__ = [
    "BookService",
    "LibraryStats",
    "ValidationOutcome",
    "validate_book_changes",
    "validate_new_book",
]

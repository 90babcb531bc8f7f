"""Entity: Book."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.app.entities.core._base import Entity


class BookStatus(str, Enum):
    """Reading status of a book in a personal library."""

    READING = "Reading"
    COMPLETED = "Completed"
    WISHLIST = "Wishlist"


class Attachment(BaseModel):
    """Metadata of the single optional file bound to a book.

    ``storage_path`` is relative to the configured attachment directory.
    """

    present: bool = False
    storage_path: str = ""
    size_bytes: int = Field(default=0, ge=0)

    @classmethod
    def absent(cls) -> "Attachment":
        return cls()


class Book(Entity):
    """Book entity representing one record in a user's personal library.

    This is the domain model that contains business logic and validation.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    owner_id: str = Field(description="Identifier of the owning user")
    title: str = Field(min_length=1, description="Title")
    author: str = Field(min_length=1, description="Author")
    description: str = Field(default="", description="Free-form description")
    notes: str = Field(default="", description="Personal notes")
    cover_image: str = Field(default="", description="Cover image URL")
    status: BookStatus = Field(default=BookStatus.WISHLIST)
    rating: int = Field(default=0, ge=0, le=5)
    attachment: Attachment = Field(default_factory=Attachment.absent)
    version: int = Field(default=1, ge=1, description="Optimistic concurrency counter")

    @property
    def has_attachment(self) -> bool:
        return self.attachment.present

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.owner_id == other.owner_id
            and self.title == other.title
            and self.author == other.author
            and self.description == other.description
            and self.notes == other.notes
            and self.cover_image == other.cover_image
            and self.status == other.status
            and self.rating == other.rating
            and self.attachment == other.attachment
        )

    def __hash__(self) -> int:
        """Hash based on identity attributes, ignoring timestamps."""
        return hash((self.id, self.owner_id, self.title, self.author))

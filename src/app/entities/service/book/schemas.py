"""Input schemas for creating and changing books."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.app.entities.service.book.entity import BookStatus


def _strip_required(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
    return value


class BookDraft(BaseModel):
    """Fields of a book about to be created.

    Unknown keys (including ``id``, ``owner_id`` and ``attachment``) are dropped,
    so callers can never choose system-maintained values.
    """

    model_config = ConfigDict(extra="ignore")

    title: str
    author: str
    description: str = ""
    notes: str = ""
    cover_image: str = ""
    status: BookStatus = BookStatus.WISHLIST
    rating: int = Field(default=0, ge=0, le=5)

    @field_validator("title", "author", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> Any:
        return _strip_required(value)

    @field_validator("description", "notes", "cover_image", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or BookStatus.WISHLIST

    @field_validator("rating", mode="before")
    @classmethod
    def _default_rating(cls, value: Any) -> Any:
        return value or 0


class BookChanges(BaseModel):
    """Partial update of a book; ``None`` means "leave unchanged".

    Empty strings are a valid overwrite for the optional text fields, but a
    blank ``title`` or ``author`` is ignored so required fields are never cleared.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    author: str | None = None
    description: str | None = None
    notes: str | None = None
    cover_image: str | None = None
    status: BookStatus | None = None
    rating: int | None = Field(default=None, ge=0, le=5)

    @field_validator("title", "author", mode="before")
    @classmethod
    def _blank_means_unchanged(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value or None

    @field_validator("status", mode="before")
    @classmethod
    def _falsy_status_unchanged(cls, value: Any) -> Any:
        return value or None

    def column_values(self) -> dict[str, Any]:
        """Return the supplied changes keyed by table column."""
        return self.model_dump(mode="json", exclude_none=True)

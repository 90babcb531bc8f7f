"""Explicit validation of book input at the service boundary."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from src.app.entities.service.book import BookChanges, BookDraft

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ValidationOutcome(Generic[T]):
    """Either a validated value or the list of problems found."""

    value: T | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "body"
        message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}")
    return messages


def _validate(model: type[T], fields: Any) -> ValidationOutcome[T]:
    if not isinstance(fields, Mapping):
        return ValidationOutcome(errors=["body: must be an object"])
    try:
        return ValidationOutcome(value=model.model_validate(dict(fields)))
    except ValidationError as exc:
        return ValidationOutcome(errors=_format_errors(exc))


def validate_new_book(fields: Any) -> ValidationOutcome[BookDraft]:
    """Validate fields for a new book: title and author required, defaults applied."""
    return _validate(BookDraft, fields)


def validate_book_changes(fields: Any) -> ValidationOutcome[BookChanges]:
    """Validate a partial update; omitted or blank required fields mean "unchanged"."""
    return _validate(BookChanges, fields)

"""Unit tests for the book entity package.

Covers the domain model, the input schemas and the repository that share the
``src.app.entities.service.book`` package.
"""

from uuid import UUID

import pytest
from pydantic import ValidationError
from sqlmodel import Session

from src.app.entities.service.book import (
    Attachment,
    Book,
    BookChanges,
    BookDraft,
    BookRepository,
    BookStatus,
)
from tests.fixtures.core import OTHER_OWNER, OWNER


class TestBook:
    """Test the Book domain entity."""

    def test_book_creation_with_defaults(self):
        """Book should get a UUID, Wishlist status, rating 0 and no attachment."""
        book = Book(owner_id=OWNER, title="Dune", author="Herbert")

        UUID(book.id)
        assert book.status == BookStatus.WISHLIST
        assert book.rating == 0
        assert book.version == 1
        assert book.attachment == Attachment.absent()
        assert not book.has_attachment

    @pytest.mark.parametrize("rating", [-1, 6])
    def test_rating_out_of_range_rejected(self, rating: int):
        with pytest.raises(ValidationError):
            Book(owner_id=OWNER, title="Dune", author="Herbert", rating=rating)

    def test_equality_ignores_timestamps(self):
        book = Book(owner_id=OWNER, title="Dune", author="Herbert")
        later = book.model_copy(update={"updated_at": book.updated_at.replace(year=2099)})

        assert book == later
        assert hash(book) == hash(later)

    def test_status_values_match_wire_names(self):
        assert [s.value for s in BookStatus] == ["Reading", "Completed", "Wishlist"]


class TestBookDraft:
    def test_defaults_applied_for_falsy_status_and_rating(self):
        draft = BookDraft.model_validate(
            {"title": "Dune", "author": "Herbert", "status": "", "rating": None}
        )

        assert draft.status == BookStatus.WISHLIST
        assert draft.rating == 0

    def test_required_fields_are_trimmed(self):
        draft = BookDraft.model_validate({"title": "  Dune ", "author": " Herbert"})

        assert draft.title == "Dune"
        assert draft.author == "Herbert"

    @pytest.mark.parametrize("field", ["title", "author"])
    def test_blank_required_field_rejected(self, field: str):
        data = {"title": "Dune", "author": "Herbert", field: "   "}
        with pytest.raises(ValidationError):
            BookDraft.model_validate(data)

    def test_system_fields_are_ignored(self):
        draft = BookDraft.model_validate(
            {
                "title": "Dune",
                "author": "Herbert",
                "id": "chosen-id",
                "owner_id": "someone-else",
                "attachment": {"present": True, "storage_path": "x.pdf"},
            }
        )

        assert "owner_id" not in draft.model_dump()
        assert "attachment" not in draft.model_dump()


class TestBookChanges:
    def test_blank_title_and_author_mean_unchanged(self):
        changes = BookChanges.model_validate({"title": "", "author": "  ", "rating": 4})

        assert changes.column_values() == {"rating": 4}

    def test_empty_string_overwrites_optional_text(self):
        changes = BookChanges.model_validate({"notes": "", "description": ""})

        assert changes.column_values() == {"notes": "", "description": ""}

    def test_rating_zero_is_applied(self):
        assert BookChanges.model_validate({"rating": 0}).column_values() == {"rating": 0}

    def test_status_serialized_by_value(self):
        changes = BookChanges.model_validate({"status": "Completed"})

        assert changes.column_values() == {"status": "Completed"}

    def test_nothing_supplied_is_empty(self):
        assert BookChanges.model_validate({"status": ""}).column_values() == {}


class TestBookRepository:
    """Test owner-scoped persistence."""

    def _draft(self, title: str = "Dune", **fields) -> BookDraft:
        return BookDraft.model_validate({"title": title, "author": "Herbert", **fields})

    def test_create_and_get(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft())

        fetched = repository.get(created.id, OWNER)
        assert fetched == created
        assert fetched.owner_id == OWNER
        assert fetched.version == 1

    def test_get_other_owner_returns_none(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft())

        assert repository.get(created.id, OTHER_OWNER) is None
        assert repository.get("missing", OWNER) is None

    def test_list_scoped_and_filtered(self, repository: BookRepository):
        repository.create(OWNER, self._draft("A", status="Reading"))
        repository.create(OWNER, self._draft("B", status="Completed"))
        repository.create(OTHER_OWNER, self._draft("C", status="Reading"))

        assert {b.title for b in repository.list_all(OWNER)} == {"A", "B"}
        reading = repository.list_all(OWNER, status=BookStatus.READING)
        assert [b.title for b in reading] == ["A"]
        assert repository.list_all(OWNER, has_attachment=True) == []

    def test_list_newest_first(self, repository: BookRepository):
        for title in ("first", "second", "third"):
            repository.create(OWNER, self._draft(title))

        books = repository.list_all(OWNER)
        created = [b.created_at for b in books]
        assert created == sorted(created, reverse=True)

    def test_update_applies_only_supplied_fields(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft(notes="keep me"))

        updated = repository.update(
            created.id, OWNER, BookChanges.model_validate({"rating": 5, "title": ""})
        )

        assert updated is not None
        assert updated.rating == 5
        assert updated.title == "Dune"
        assert updated.notes == "keep me"
        assert updated.version == created.version + 1

    def test_update_other_owner_returns_none(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft())

        result = repository.update(
            created.id, OTHER_OWNER, BookChanges.model_validate({"rating": 1})
        )

        assert result is None
        assert repository.get(created.id, OWNER).rating == 0

    def test_update_attachment_requires_expected_version(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft())
        attachment = Attachment(present=True, storage_path="abc.pdf", size_bytes=10)

        stale = repository.update_attachment(
            created.id, OWNER, attachment, expected_version=created.version + 1
        )
        fresh = repository.update_attachment(
            created.id, OWNER, attachment, expected_version=created.version
        )

        assert stale is None
        assert fresh is not None
        assert fresh.attachment == attachment

    def test_delete(self, repository: BookRepository):
        created = repository.create(OWNER, self._draft())

        assert repository.delete(created.id, OTHER_OWNER) is False
        assert repository.delete(created.id, OWNER) is True
        assert repository.get(created.id, OWNER) is None
        assert repository.delete(created.id, OWNER) is False

    def test_counts(self, repository: BookRepository):
        first = repository.create(OWNER, self._draft("A", status="Reading"))
        repository.create(OWNER, self._draft("B"))
        repository.create(OTHER_OWNER, self._draft("C", status="Completed"))
        repository.update_attachment(
            first.id,
            OWNER,
            Attachment(present=True, storage_path="a.pdf", size_bytes=1),
            expected_version=first.version,
        )
        second = repository.create(OWNER, self._draft("D"))
        repository.update_attachment(
            second.id,
            OWNER,
            Attachment(present=True, storage_path="d.pdf", size_bytes=2048),
            expected_version=second.version,
        )

        assert repository.count_by_status(OWNER) == {
            BookStatus.READING: 1,
            BookStatus.COMPLETED: 0,
            BookStatus.WISHLIST: 2,
        }
        assert repository.attachment_totals(OWNER) == (2, 2049)
        assert repository.attachment_totals(OTHER_OWNER) == (0, 0)
        assert repository.attachment_index() == {
            "a.pdf": (first.id, 1),
            "d.pdf": (second.id, 2048),
        }

    def test_reads_are_not_served_from_stale_identity_map(self, session: Session):
        writer = BookRepository(session)
        created = writer.create(OWNER, self._draft())
        writer.get(created.id, OWNER)

        writer.update(created.id, OWNER, BookChanges.model_validate({"rating": 3}))

        assert writer.get(created.id, OWNER).rating == 3

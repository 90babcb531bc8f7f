"""Book repository: owner-scoped data access for book records."""

from typing import Any

import sqlalchemy as sa
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, select

from src.app.entities.core._base import utc_now
from src.app.entities.service.book.entity import Attachment, Book, BookStatus
from src.app.entities.service.book.schemas import BookChanges, BookDraft
from src.app.entities.service.book.table import BookTable


def _to_entity(row: BookTable) -> Book:
    return Book(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        author=row.author,
        description=row.description,
        notes=row.notes,
        cover_image=row.cover_image,
        status=BookStatus(row.status),
        rating=row.rating,
        attachment=Attachment(
            present=row.attachment_present,
            storage_path=row.attachment_path,
            size_bytes=row.attachment_size,
        ),
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class BookRepository:
    """Data-access layer for books.

    Every operation is scoped by ``owner_id``. A record that belongs to someone
    else is reported exactly like a missing one (``None`` / ``False``).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def _owned(self, book_id: str, owner_id: str) -> list[Any]:
        return [col(BookTable.id) == book_id, col(BookTable.owner_id) == owner_id]

    def create(self, owner_id: str, draft: BookDraft) -> Book:
        row = BookTable(owner_id=owner_id, **draft.model_dump(mode="json"))
        self._session.add(row)
        self._commit()
        self._session.refresh(row)
        logger.debug("Created book {} for owner {}", row.id, owner_id)
        return _to_entity(row)

    def get(self, book_id: str, owner_id: str) -> Book | None:
        statement = (
            select(BookTable)
            .where(*self._owned(book_id, owner_id))
            .execution_options(populate_existing=True)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return _to_entity(row)

    def list_all(
        self,
        owner_id: str,
        status: BookStatus | None = None,
        has_attachment: bool | None = None,
    ) -> list[Book]:
        """List an owner's books, newest first."""
        statement = select(BookTable).where(col(BookTable.owner_id) == owner_id)
        if status is not None:
            statement = statement.where(col(BookTable.status) == status.value)
        if has_attachment is not None:
            statement = statement.where(
                col(BookTable.attachment_present) == has_attachment
            )
        statement = statement.order_by(col(BookTable.created_at).desc()).execution_options(
            populate_existing=True
        )
        return [_to_entity(row) for row in self._session.exec(statement).all()]

    def _conditional_update(
        self,
        book_id: str,
        owner_id: str,
        values: dict[str, Any],
        expected_version: int | None = None,
    ) -> Book | None:
        conditions = self._owned(book_id, owner_id)
        if expected_version is not None:
            conditions.append(col(BookTable.version) == expected_version)

        statement = (
            sa.update(BookTable)
            .where(*conditions)
            .values(**values, version=col(BookTable.version) + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._session.exec(statement)  # type: ignore[call-overload]
        except SQLAlchemyError:
            self._session.rollback()
            raise

        if result.rowcount == 0:
            self._session.rollback()
            return None

        self._commit()
        return self.get(book_id, owner_id)

    def update(self, book_id: str, owner_id: str, changes: BookChanges) -> Book | None:
        """Apply only the supplied fields; ``None`` when the book is not the owner's."""
        return self._conditional_update(book_id, owner_id, changes.column_values())

    def update_attachment(
        self,
        book_id: str,
        owner_id: str,
        attachment: Attachment,
        expected_version: int,
    ) -> Book | None:
        """Replace attachment metadata if the record is still at ``expected_version``."""
        return self._conditional_update(
            book_id,
            owner_id,
            {
                "attachment_present": attachment.present,
                "attachment_path": attachment.storage_path,
                "attachment_size": attachment.size_bytes,
            },
            expected_version=expected_version,
        )

    def delete(self, book_id: str, owner_id: str) -> bool:
        statement = (
            sa.delete(BookTable)
            .where(*self._owned(book_id, owner_id))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._session.exec(statement)  # type: ignore[call-overload]
        except SQLAlchemyError:
            self._session.rollback()
            raise
        self._commit()
        return result.rowcount > 0

    def count_by_status(self, owner_id: str) -> dict[BookStatus, int]:
        statement = (
            select(BookTable.status, func.count())
            .where(col(BookTable.owner_id) == owner_id)
            .group_by(BookTable.status)
        )
        counts = {status: 0 for status in BookStatus}
        for status, count in self._session.exec(statement).all():
            counts[BookStatus(status)] = count
        return counts

    def attachment_totals(self, owner_id: str) -> tuple[int, int]:
        """Number of the owner's books with an attachment and their combined size in bytes."""
        statement = select(
            func.count(), func.coalesce(func.sum(BookTable.attachment_size), 0)
        ).where(
            col(BookTable.owner_id) == owner_id,
            col(BookTable.attachment_present).is_(True),
        )
        count, size_bytes = self._session.exec(statement).one()
        return count, size_bytes

    def attachment_index(self) -> dict[str, tuple[str, int]]:
        """Map every referenced storage path to ``(book_id, size_bytes)`` across all owners.

        Maintenance use only; never exposed through the API.
        """
        statement = select(
            BookTable.attachment_path, BookTable.id, BookTable.attachment_size
        ).where(col(BookTable.attachment_present).is_(True))
        return {
            path: (book_id, size)
            for path, book_id, size in self._session.exec(statement).all()
        }

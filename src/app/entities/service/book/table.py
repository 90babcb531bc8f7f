"""Book database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable
from src.app.entities.service.book.entity import BookStatus


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    Attachment metadata is flattened into ``attachment_*`` columns.
    """

    __tablename__ = "book"
    __table_args__ = (
        sa.Index("ix_book_owner_status", "owner_id", "status"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_book_rating_range"),
    )

    owner_id: str = Field(nullable=False)
    title: str = Field(nullable=False)
    author: str = Field(nullable=False)
    description: str = ""
    notes: str = ""
    cover_image: str = ""
    status: str = Field(default=BookStatus.WISHLIST.value, nullable=False)
    rating: int = Field(default=0, nullable=False)

    attachment_present: bool = Field(default=False, nullable=False)
    attachment_path: str = ""
    attachment_size: int = 0

    version: int = Field(default=1, nullable=False)

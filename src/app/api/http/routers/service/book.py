"""Book API router: owner-scoped CRUD plus the PDF attachment."""

import re
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import PurePath
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile
from loguru import logger
from pydantic import BaseModel
from starlette.responses import FileResponse, StreamingResponse

from src.app.api.http.deps import get_attachment_store, get_book_service, get_current_owner
from src.app.core.errors import (
    BookNotFoundError,
    BookServiceError,
    BookValidationError,
    ConcurrentModification,
    PayloadTooLarge,
    StorageIOError,
    UnsupportedMediaType,
)
from src.app.core.services import BookService, LibraryStats
from src.app.core.storage import AttachmentStore
from src.app.entities.service.book import Book, BookStatus

router = APIRouter()

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/"\r\n\t]+')


class BookListResponse(BaseModel):
    count: int
    books: list[Book]


class MessageResponse(BaseModel):
    message: str


def _http_error(exc: BookServiceError) -> HTTPException:
    if isinstance(exc, BookValidationError):
        return HTTPException(status_code=400, detail=exc.errors)
    if isinstance(exc, ConcurrentModification):
        return HTTPException(status_code=409, detail=exc.message)
    if isinstance(exc, PayloadTooLarge):
        return HTTPException(status_code=413, detail=exc.message)
    if isinstance(exc, UnsupportedMediaType):
        return HTTPException(status_code=415, detail=exc.message)
    if isinstance(exc, BookNotFoundError):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, StorageIOError):
        logger.error("Attachment storage failure: {}", exc.message)
        return HTTPException(status_code=500, detail="Attachment storage failure")
    return HTTPException(status_code=500, detail=exc.message)


@contextmanager
def _service_errors() -> Iterator[None]:
    """Translate service failures into HTTP responses."""
    try:
        yield
    except BookServiceError as exc:
        raise _http_error(exc) from exc


def _download_name(book: Book) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", book.title).strip() or "book"
    return f"{stem}{PurePath(book.attachment.storage_path).suffix or '.pdf'}"


@router.get("", response_model=BookListResponse)
def list_books(
    status: BookStatus | None = Query(default=None),
    has_attachment: bool | None = Query(default=None),
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> BookListResponse:
    """List the caller's books, newest first."""
    books = service.list_books(owner_id, status=status, has_attachment=has_attachment)
    return BookListResponse(count=len(books), books=books)


@router.get("/stats", response_model=LibraryStats)
def library_stats(
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> LibraryStats:
    return service.library_stats(owner_id)


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> Book:
    with _service_errors():
        return service.get_book(owner_id, book_id)


@router.post("", response_model=Book, status_code=201)
def create_book(
    fields: Any = Body(...),
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> Book:
    """Create a book; status defaults to Wishlist and rating to 0."""
    with _service_errors():
        return service.create_book(owner_id, fields)


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    fields: Any = Body(...),
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> Book:
    """Apply a partial update; omitted fields are left untouched."""
    with _service_errors():
        return service.update_book(owner_id, book_id, fields)


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: str,
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> MessageResponse:
    with _service_errors():
        service.delete_book(owner_id, book_id)
    return MessageResponse(message="Book deleted successfully")


@router.post("/{book_id}/attachment", response_model=Book)
def upload_attachment(
    book_id: str,
    file: UploadFile = File(...),
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
    store: AttachmentStore = Depends(get_attachment_store),
) -> Book:
    """Attach a PDF to the book, replacing any previous one."""
    # One byte past the limit is enough to know the upload is too large.
    data = file.file.read(store.max_size_bytes + 1)
    with _service_errors():
        return service.upload_attachment(
            owner_id, book_id, data, file.content_type, filename=file.filename
        )


@router.get("/{book_id}/attachment")
def download_attachment(
    book_id: str,
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> FileResponse:
    """Download the attached file as ``<title>.pdf``."""
    with _service_errors():
        book, stream = service.download_attachment(owner_id, book_id)
    return FileResponse(
        stream.path,
        media_type=stream.media_type,
        filename=_download_name(book),
    )


@router.get("/{book_id}/attachment/content")
def read_attachment(
    book_id: str,
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> StreamingResponse:
    """Stream the attached file for display in the browser's reader."""
    with _service_errors():
        _, stream = service.download_attachment(owner_id, book_id)
    return StreamingResponse(
        stream.iter_chunks(),
        media_type=stream.media_type,
        headers={
            "Content-Length": str(stream.size_bytes),
            "Content-Disposition": "inline",
        },
    )


@router.delete("/{book_id}/attachment", response_model=Book)
def remove_attachment(
    book_id: str,
    owner_id: str = Depends(get_current_owner),
    service: BookService = Depends(get_book_service),
) -> Book:
    with _service_errors():
        return service.remove_attachment(owner_id, book_id)

"""Unit tests for the attachment storage audit."""

from src.app.core.services import AttachmentManager
from src.app.core.services.attachment import audit_storage, prune_orphans
from src.app.core.storage import AttachmentStore
from src.app.entities.service.book import BookDraft, BookRepository
from tests.fixtures.core import OWNER
from tests.utils import make_pdf


def _attached_book(repository: BookRepository, manager: AttachmentManager, size: int):
    book = repository.create(OWNER, BookDraft(title="Dune", author="Herbert"))
    return manager.attach(book, make_pdf(size), "application/pdf")


def test_consistent_storage_is_clean(
    repository: BookRepository, attachment_manager: AttachmentManager, store: AttachmentStore
):
    _attached_book(repository, attachment_manager, 100)

    assert audit_storage(repository, store).clean


def test_problems_are_classified(
    repository: BookRepository, attachment_manager: AttachmentManager, store: AttachmentStore
):
    missing = _attached_book(repository, attachment_manager, 100)
    truncated = _attached_book(repository, attachment_manager, 100)
    store.resolve(missing.attachment.storage_path).unlink()
    store.resolve(truncated.attachment.storage_path).write_bytes(b"%PDF")
    store.write("0" * 32 + ".pdf", make_pdf(10))

    audit = audit_storage(repository, store)

    assert not audit.clean
    assert audit.orphaned_files == ["0" * 32 + ".pdf"]
    assert audit.missing_files == {missing.id: missing.attachment.storage_path}
    assert audit.size_mismatches == {truncated.id: truncated.attachment.storage_path}


def test_prune_removes_only_orphans(
    repository: BookRepository, attachment_manager: AttachmentManager, store: AttachmentStore
):
    kept = _attached_book(repository, attachment_manager, 100)
    store.write("f" * 32 + ".pdf", make_pdf(10))

    removed = prune_orphans(audit_storage(repository, store), store)

    assert removed == 1
    assert store.list_stored() == [kept.attachment.storage_path]

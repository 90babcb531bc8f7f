"""Consistency check between attachment metadata and the attachment directory."""

from dataclasses import dataclass, field

from loguru import logger

from src.app.core.storage.attachment_store import AttachmentStore
from src.app.entities.service.book import BookRepository


@dataclass
class StorageAudit:
    orphaned_files: list[str] = field(default_factory=list)
    missing_files: dict[str, str] = field(default_factory=dict)  # book id -> storage path
    size_mismatches: dict[str, str] = field(default_factory=dict)  # book id -> storage path

    @property
    def clean(self) -> bool:
        return not (self.orphaned_files or self.missing_files or self.size_mismatches)


def audit_storage(repository: BookRepository, store: AttachmentStore) -> StorageAudit:
    """Compare every attachment record with the files on disk.

    Orphaned files are stale leftovers of best-effort removals. Missing or
    truncated files are records that downloads will report as inconsistent.
    """
    referenced = repository.attachment_index()
    stored = set(store.list_stored())
    audit = StorageAudit(orphaned_files=sorted(stored - referenced.keys()))

    for storage_path, (book_id, size_bytes) in referenced.items():
        if storage_path not in stored:
            audit.missing_files[book_id] = storage_path
        elif store.size_of(storage_path) != size_bytes:
            audit.size_mismatches[book_id] = storage_path

    logger.info(
        "Storage audit: {} orphaned, {} missing, {} size mismatches",
        len(audit.orphaned_files),
        len(audit.missing_files),
        len(audit.size_mismatches),
    )
    return audit


def prune_orphans(audit: StorageAudit, store: AttachmentStore) -> int:
    """Remove the orphaned files found by ``audit``; returns how many were removed."""
    return sum(store.remove_quietly(name) for name in audit.orphaned_files)

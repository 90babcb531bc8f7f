from .attachment_manager import AttachmentManager
from .audit import StorageAudit, audit_storage, prune_orphans

__all__ = ["AttachmentManager", "StorageAudit", "audit_storage", "prune_orphans"]

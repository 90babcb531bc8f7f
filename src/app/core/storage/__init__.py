"""Attachment file storage."""

from .attachment_store import AttachmentStore, AttachmentStream, normalize_mime_type

__all__ = ["AttachmentStore", "AttachmentStream", "normalize_mime_type"]

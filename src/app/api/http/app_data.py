from dataclasses import dataclass

from src.app.core.services import (
    DbSessionService,
    JwtVerificationService,
)
from src.app.core.storage import AttachmentStore


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    attachment_store: AttachmentStore
    jwt_verify_service: JwtVerificationService

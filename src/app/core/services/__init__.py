"""Core services exports."""

# Attachment Services
from .attachment import AttachmentManager

# Book Services
from .book import BookService, LibraryStats

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

__all__ = [
    # Attachment Services
    "AttachmentManager",
    # Book Services
    "BookService",
    "LibraryStats",
    # Database Service
    "DbManageService",
    "DbSessionService",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
]

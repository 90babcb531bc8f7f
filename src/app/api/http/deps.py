"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from src.app.api.http.app_data import ApplicationDependencies
from src.app.core.models import TokenClaims
from src.app.core.services import (
    AttachmentManager,
    BookService,
    JwtVerificationService,
)
from src.app.core.storage import AttachmentStore
from src.app.entities.service.book import BookRepository


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session for the duration of one request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_attachment_store(request: Request) -> AttachmentStore:
    """Get the attachment store instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.attachment_store


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.jwt_verify_service


async def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Missing Bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_header.split(" ", 1)[1].strip()
    claims = await jwt_verify.verify_jwt(token)
    request.state.claims = claims
    return claims


async def get_current_owner(claims: TokenClaims = Depends(get_current_claims)) -> str:
    """Resolve the id of the user every book operation is scoped to."""
    return claims.subject


def get_book_service(
    db: Session = Depends(get_db_session),
    store: AttachmentStore = Depends(get_attachment_store),
) -> BookService:
    repository = BookRepository(db)
    return BookService(repository, AttachmentManager(repository, store))

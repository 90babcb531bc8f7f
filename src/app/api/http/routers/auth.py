"""Authentication introspection endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.app.api.http.deps import get_current_claims
from src.app.core.models import TokenClaims

router = APIRouter(tags=["auth"])


class MeResponse(BaseModel):
    """Who the API thinks the caller is."""

    owner_id: str
    issuer: str
    email: str | None = None
    name: str | None = None
    expires_at: int
    claims: dict[str, Any]


@router.get("/me", response_model=MeResponse)
async def get_me(claims: TokenClaims = Depends(get_current_claims)) -> MeResponse:
    """Mirror the resolved owner and the verified token claims."""
    return MeResponse(
        owner_id=claims.subject,
        issuer=claims.issuer,
        email=claims.email,
        name=claims.name,
        expires_at=claims.expires_at,
        claims=claims.custom_claims,
    )

"""Verified access-token claims."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of a verified JWT."""

    raw_token: str = Field(default="", description="Original JWT token")

    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (owner id)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID")

    email: str | None = Field(default=None, description="Email address")
    name: str | None = Field(default=None, description="Display name")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Claims not mapped onto a field"
    )

    @classmethod
    def from_jwt_payload(cls, payload: dict[str, Any], raw_token: str = "") -> "TokenClaims":
        """Create TokenClaims from a verified JWT payload."""
        remaining = dict(payload)
        return cls(
            raw_token=raw_token,
            issuer=remaining.pop("iss", ""),
            subject=remaining.pop("sub", ""),
            audience=remaining.pop("aud", []),
            expires_at=remaining.pop("exp"),
            issued_at=remaining.pop("iat"),
            not_before=remaining.pop("nbf", None),
            jti=remaining.pop("jti", None),
            email=remaining.pop("email", None),
            name=remaining.pop("name", None),
            custom_claims=remaining,
        )

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import get_config

_REGISTERED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for minting the API's own HS256 access tokens."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        valid_after_seconds: int = 0,
        issuer: str | None = None,
        audience: str | list[str] | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the owner id
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to ``jwt.access_token_ttl_seconds``)
            valid_after_seconds: Time in seconds before the token is valid
            issuer: Issuer (iss) claim (defaults to config issuer)
            audience: Audience (aud) claim (defaults to config audiences)
            algorithm: Signing algorithm, must be in ``jwt.allowed_algorithms``
            include_jti: Whether to include a unique JWT ID claim
            secret: Signing secret (defaults to ``jwt.signing_secret``)

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If the secret is missing or the algorithm is not allowed
        """
        config: ConfigData = get_config()

        secret = secret or config.jwt.signing_secret
        if not secret:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                config.jwt.allowed_algorithms,
            )
            raise HTTPException(status_code=500, detail=f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        lifetime = (
            expires_in_seconds
            if expires_in_seconds is not None
            else config.jwt.access_token_ttl_seconds
        )
        payload: dict[str, Any] = {
            "iss": issuer or config.jwt.issuer,
            "sub": subject,
            "aud": audience or config.jwt.audiences,
            "exp": now + lifetime,
            "iat": now,
            "nbf": now + valid_after_seconds,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise HTTPException(status_code=500, detail=f"JWT encoding failed: {e}") from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        owner_id: str,
        expires_in_seconds: int | None = None,
        **extra_claims: Any,
    ) -> str:
        """Generate an access token whose subject is ``owner_id``.

        Example:
            token = generate_access_token("user-123", email="reader@example.com")
        """
        return self.generate_jwt(
            subject=owner_id,
            claims=extra_claims,
            expires_in_seconds=expires_in_seconds,
        )

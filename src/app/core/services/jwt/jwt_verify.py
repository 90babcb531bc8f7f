"""JWT verification service."""

from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.app.core.models import TokenClaims
from src.app.core.services.jwt.jwt_utils import preview_jwt
from src.app.runtime.context import get_config


class JwtVerificationService:
    """Verifies access tokens signed with the configured shared secret."""

    async def verify_jwt(self, token: str, *, key: str | None = None) -> TokenClaims:
        cfg = get_config()
        pv = preview_jwt(token)

        # alg allowlist
        if pv.alg not in cfg.jwt.allowed_algorithms:
            raise HTTPException(status_code=401, detail="Disallowed JWT algorithm")

        verification_key = key or cfg.jwt.signing_secret
        if not verification_key:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.issuer]},
            "aud": {"essential": True, "values": cfg.jwt.audiences},
            "sub": {"essential": True},
            "exp": {"essential": True},
            "iat": {"essential": True},
        }

        # verify signature + registered claims
        try:
            claims = jwt.decode(token, verification_key, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected JWT: {}", exc)
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        if not claims.get("sub"):
            raise HTTPException(status_code=401, detail="Missing sub claim")

        return TokenClaims.from_jwt_payload(dict(claims), raw_token=token)

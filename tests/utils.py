import base64
import time
from typing import Any

from authlib.jose import jwt

PDF_HEADER = b"%PDF-1.4\n"


def make_pdf(size_bytes: int, fill: bytes = b"0") -> bytes:
    """Return ``size_bytes`` of data that starts like a PDF document."""
    if size_bytes <= len(PDF_HEADER):
        return PDF_HEADER[:size_bytes]
    return PDF_HEADER + fill * (size_bytes - len(PDF_HEADER))


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def sign_hs_token(
    secret: str,
    claims: dict[str, Any],
    algorithm: str = "HS256",
    lifetime: int = 3600,
) -> str:
    """Sign ``claims`` directly with authlib, bypassing the generator's checks."""
    now = int(time.time())
    payload = {"iat": now, "nbf": now, "exp": now + lifetime, **claims}
    token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
    return token.decode() if isinstance(token, bytes) else token

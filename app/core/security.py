import base64
import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """Verified caller identity handed to the services."""
    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode((segment + padding).encode("utf-8"))


def _sign(signing_input: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return _b64encode(digest)


def create_access_token(
        user_id: str,
        role: UserRole,
        expires_in: Optional[int] = 3600,
        secret: Optional[str] = None,
        now: Optional[datetime] = None,
) -> str:
    """Sign an HS256 token carrying `sub` and `role`. Used by tests and provisioning tools."""
    secret = secret or settings.JWT_SECRET
    issued_at = int((now or datetime.now(timezone.utc)).timestamp())
    payload: Dict[str, Any] = {"sub": str(user_id), "role": UserRole(role).value, "iat": issued_at}
    if expires_in is not None:
        payload["exp"] = issued_at + expires_in

    header_b64 = _b64encode(json.dumps({"alg": "HS256", "typ": "JWT"}, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signature = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret)
    return f"{header_b64}.{payload_b64}.{signature}"


def decode_access_token(
        token: str,
        secret: Optional[str] = None,
        now: Optional[datetime] = None,
) -> Principal:
    """Verify an HS256 bearer token and return the caller it names."""
    secret = secret or settings.JWT_SECRET
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Malformed token")

    header_b64, payload_b64, signature_b64 = parts
    expected = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret)
    if not hmac.compare_digest(expected, signature_b64):
        raise AuthenticationError("Invalid token signature")

    try:
        header = json.loads(_b64decode(header_b64))
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as e:
        raise AuthenticationError("Malformed token") from e

    if not isinstance(header, dict) or header.get("alg") != "HS256":
        raise AuthenticationError("Only HS256 tokens are supported")
    if not isinstance(payload, dict):
        raise AuthenticationError("Malformed token")

    skew = settings.JWT_CLOCK_SKEW_SECONDS
    now_epoch = int((now or datetime.now(timezone.utc)).timestamp())
    exp = payload.get("exp")
    if isinstance(exp, int) and now_epoch > exp + skew:
        raise AuthenticationError("Token expired")
    nbf = payload.get("nbf")
    if isinstance(nbf, int) and now_epoch + skew < nbf:
        raise AuthenticationError("Token not yet valid")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no subject")
    try:
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise AuthenticationError("Token carries an unknown role") from e

    return Principal(user_id=str(user_id), role=role)

"""
Security helpers: session credentials, password hashing and access control.

``CredentialService`` issues and verifies a compact signed token
(``header.payload.signature``, each part base64url encoded, signed with
HMAC‑SHA256).  The payload binds the user's id and email; an ``exp``
claim is only added when a lifetime is configured.  The token travels
in the ``token`` cookie set by ``/login``.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 and a random 16‑byte salt
per call.

The FastAPI dependencies at the bottom of the module resolve the
cookie into a full user record once per request (``get_optional_user``,
``get_current_user``) and enforce role membership (``require_roles``).
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request

from . import errors
from ..schemas.user import UserRead

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


class CredentialService:
    """Issue and verify opaque bearer credentials bound to a user identity."""

    def __init__(self, secret_key: str, expire_minutes: int = 0) -> None:
        self._secret = secret_key.encode("utf-8")
        self.expire_minutes = expire_minutes

    def _sign(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def issue(self, user_id: int, email: str) -> str:
        """Create a signed token for ``user_id``/``email``.

        Raises ``InternalError`` if the claims cannot be serialised.
        """
        claims: Dict[str, Any] = {"id": user_id, "email": email, "iat": int(time.time())}
        if self.expire_minutes > 0:
            claims["exp"] = claims["iat"] + self.expire_minutes * 60
        try:
            header_b64 = _b64_url_encode(
                json.dumps({"alg": "HS256", "typ": "JWT"}, separators=(",", ":")).encode("utf-8")
            )
            payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        except (TypeError, ValueError) as exc:
            raise errors.InternalError("Failed to generate token") from exc
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        return f"{header_b64}.{payload_b64}.{_b64_url_encode(self._sign(signing_input))}"

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the claims of a valid token.

        Raises ``InvalidCredentialError`` for malformed, tampered or
        expired tokens.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise errors.InvalidCredentialError()
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        try:
            actual_sig = _b64_url_decode(signature_b64)
            claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as exc:
            raise errors.InvalidCredentialError() from exc
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(self._sign(signing_input), actual_sig):
            raise errors.InvalidCredentialError()
        if not isinstance(claims, dict) or "id" not in claims:
            raise errors.InvalidCredentialError()
        exp = claims.get("exp")
        if exp is not None and int(exp) < int(time.time()):
            raise errors.InvalidCredentialError("Token expired")
        return claims


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    Returns ``"<salt hex>$<hash hex>"``; a fresh salt is drawn on every
    call, so hashing the same password twice gives different strings.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


# ---------------------------------------------------------------------------
# Request dependencies
# ---------------------------------------------------------------------------

async def get_optional_user(request: Request) -> Optional[UserRead]:
    """Resolve the session cookie into a user, or ``None`` without a cookie.

    An empty cookie (what ``/logout`` leaves behind) counts as absent.  A
    cookie that fails verification, or that names a user who no longer
    exists, raises ``UnauthenticatedError``.
    """
    state = request.app.state
    token = request.cookies.get(state.settings.cookie_name)
    if not token:
        return None
    claims = state.credentials.verify(token)
    user = await state.user_service.get_user_by_id(claims["id"])
    if user is None:
        raise errors.UnauthenticatedError("User not found")
    return user


async def get_current_user(user: Optional[UserRead] = Depends(get_optional_user)) -> UserRead:
    """Dependency that requires an authenticated user."""
    if user is None:
        raise errors.UnauthenticatedError("Authentication required")
    return user


def require_roles(*roles: str) -> Callable[..., Any]:
    """Dependency factory enforcing that the current user has one of ``roles``.

    Use as ``Depends(require_roles("venue_owner"))``.  Authentication
    runs first, so a missing cookie yields 401 before the role check
    can yield 403.
    """

    async def _role_dependency(current_user: UserRead = Depends(get_current_user)) -> UserRead:
        if current_user.role not in roles:
            raise errors.ForbiddenError("Access denied")
        return current_user

    return _role_dependency

"""Caller identification, signed user ids and admin API key dependencies."""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, Request

from logo_forge.common.exceptions import AuthenticationRequiredError

logger = logging.getLogger(__name__)


@dataclass
class CallerContext:
    """Resolved caller info available to request handlers.

    ``user_id`` is the external authentication provider's user id. It is only
    set when the ``X-User-Id`` header carries a valid ``X-User-Signature``
    minted with the server secret by the session layer.
    """
    ip_address: str = "unknown"
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


def sign_user_id(user_id: str, secret_key: str) -> str:
    """HMAC-SHA256 signature of a user id, hex encoded."""
    return hmac.new(secret_key.encode(), user_id.encode(), hashlib.sha256).hexdigest()


def verify_user_signature(user_id: str, signature: str, secret_key: str) -> bool:
    """Constant-time check of a user id signature."""
    if not user_id or not signature:
        return False
    return hmac.compare_digest(sign_user_id(user_id, secret_key), signature)


async def require_api_key(
    x_logo_forge_api_key: str = Header(..., alias="X-Logo-Forge-Api-Key"),
) -> str:
    """FastAPI dependency that validates admin API key from header."""
    from logo_forge.common.config import get_settings

    settings = get_settings()
    if x_logo_forge_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_logo_forge_api_key


def client_address(request: Request, trust_forwarded_for: bool = False) -> str:
    """Network address of the caller, honouring X-Forwarded-For behind a proxy."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def resolve_caller(
    request: Request,
    x_user_id: str = Header(None, alias="X-User-Id"),
    x_user_signature: str = Header(None, alias="X-User-Signature"),
) -> CallerContext:
    """FastAPI dependency that identifies the caller.

    Returns a CallerContext with user_id set for callers presenting a valid
    signed user id, or an anonymous context keyed only by network address.
    An unsigned or forged user id is ignored, not rejected.
    """
    from logo_forge.common.config import get_settings

    settings = get_settings()
    address = client_address(request, settings.trust_forwarded_for)
    user_id = x_user_id.strip() if x_user_id else None
    if user_id and not verify_user_signature(
        user_id, (x_user_signature or "").strip(), settings.secret_key,
    ):
        logger.warning("Ignoring unsigned or forged user id from %s", address)
        user_id = None
    return CallerContext(ip_address=address, user_id=user_id or None)


async def require_user(
    request: Request,
    x_user_id: str = Header(None, alias="X-User-Id"),
    x_user_signature: str = Header(None, alias="X-User-Signature"),
) -> CallerContext:
    """FastAPI dependency for account-only endpoints."""
    caller = await resolve_caller(request, x_user_id, x_user_signature)
    if not caller.is_authenticated:
        raise AuthenticationRequiredError()
    return caller

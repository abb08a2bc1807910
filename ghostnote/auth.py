"""
GhostNote Backend — Authorization Dependency
==============================================

What:  FastAPI dependency guarding every /api endpoint.
How:   Reads the Authorization header through HTTPBearer(auto_error=False) and
       raises AuthenticationError (→ 401) when it is missing or wrong.

Modes (from settings):
    require_auth=False        → gate disabled (local development only)
    auth_token set            → header must be "Bearer <auth_token>"
    auth_token empty          → any Authorization header is accepted; the
                                credential is validated by an upstream gateway
"""

import hmac
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ghostnote.config import settings
from ghostnote.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Shared API bearer token")


async def require_authorization(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """
    Reject the request unless it carries an acceptable Authorization header.

    Raises:
        AuthenticationError: header missing, wrong scheme, or wrong token
    """
    if not settings.require_auth:
        return

    if not settings.auth_token:
        # Presence only; HTTPBearer returns None for non-Bearer schemes
        if not request.headers.get("Authorization"):
            raise AuthenticationError()
        return

    if credentials is None:
        raise AuthenticationError()

    # compare_digest needs equal types; encode so non-ASCII tokens don't raise
    if not hmac.compare_digest(
        credentials.credentials.encode("utf-8"),
        settings.auth_token.encode("utf-8"),
    ):
        logger.warning(
            "Rejected invalid bearer token from %s",
            request.client.host if request.client else "unknown",
        )
        raise AuthenticationError()

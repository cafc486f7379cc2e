"""
Authentication dependency.

Every resource router depends on get_current_identity: it extracts the bearer
token, verifies it, and attaches the identity to request.state.
"""

import asyncio
import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campuspilot.dependencies import get_identity_verifier
from campuspilot.errors import AuthError
from campuspilot.services.identity import Identity, IdentityVerifier

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as our 401, not FastAPI's default
security = HTTPBearer(auto_error=False)


async def _authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    verifier: IdentityVerifier,
) -> Identity:
    if credentials is None or not credentials.credentials:
        logger.info("Rejected %s %s: no bearer token", request.method, request.url.path)
        raise AuthError.no_token()

    identity = await asyncio.to_thread(verifier.verify, credentials.credentials)
    request.state.identity = identity
    return identity


async def get_current_identity(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> Identity:
    return await _authenticate(request, credentials, verifier)


async def identify_request(request: Request) -> Identity:
    """
    Authenticate outside the dependency graph.

    FastAPI parses the JSON body before running route dependencies, so a
    malformed body would otherwise be reported ahead of a missing token.
    Honors app.dependency_overrides for the verifier like Depends would.
    """
    provider = request.app.dependency_overrides.get(get_identity_verifier, get_identity_verifier)
    credentials = await security(request)
    return await _authenticate(request, credentials, provider())

"""
Identity token verification.

Clients authenticate with Firebase, which issues RS256-signed ID tokens. We
verify the signature against Google's published keys (JWKS) and, when a
project id is configured, the audience and issuer. HS256 tokens signed with
AUTH_JWT_SECRET are accepted as well, for local development and tests.
"""

import logging
from typing import Any, Dict, Optional

import jwt
from jwt import PyJWKClient
from pydantic import BaseModel, Field

from campuspilot.config import Settings
from campuspilot.errors import AuthError

logger = logging.getLogger(__name__)

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")


class Identity(BaseModel):
    """Verified caller. subject_id is the Firebase uid ("sub" claim)."""

    subject_id: str
    email: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)


class IdentityVerifier:
    def __init__(
        self,
        jwks_url: str,
        project_id: Optional[str] = None,
        secret: Optional[str] = None,
    ):
        self._jwks_url = jwks_url
        self._audience = project_id
        self._issuer = f"https://securetoken.google.com/{project_id}" if project_id else None
        self._secret = secret
        self._jwk_client: Optional[PyJWKClient] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityVerifier":
        return cls(
            settings.auth_jwks_url,
            project_id=settings.firebase_project_id,
            secret=settings.auth_jwt_secret,
        )

    def _get_jwk_client(self) -> PyJWKClient:
        # PyJWKClient caches fetched keys, so keep one per verifier
        if self._jwk_client is None:
            self._jwk_client = PyJWKClient(self._jwks_url)
        return self._jwk_client

    def _decode_asymmetric(self, token: str) -> Dict[str, Any]:
        signing_key = self._get_jwk_client().get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=list(ASYMMETRIC_ALGORITHMS),
            audience=self._audience,
            issuer=self._issuer,
            options={"verify_aud": self._audience is not None},
        )

    def _decode_hs256(self, token: str) -> Dict[str, Any]:
        if not self._secret:
            raise jwt.InvalidTokenError("HS256 tokens are not accepted (AUTH_JWT_SECRET unset)")
        return jwt.decode(
            token,
            self._secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )

    def verify(self, token: str) -> Identity:
        """
        Verify a bearer token and return the caller's identity.
        Blocking: the JWKS fetch does network I/O, call via asyncio.to_thread.
        """
        if not token:
            raise AuthError.no_token()
        try:
            # Read header without verifying to choose verification method
            alg = jwt.get_unverified_header(token).get("alg")
            if alg in ASYMMETRIC_ALGORITHMS:
                payload = self._decode_asymmetric(token)
            elif alg == "HS256":
                payload = self._decode_hs256(token)
            else:
                raise jwt.InvalidTokenError(f"Unsupported token algorithm: {alg}")
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthError.invalid_token()
        except jwt.PyJWTError as e:
            # Covers malformed tokens, bad signatures and JWKS fetch failures
            logger.warning("Token verification failed: %s", e)
            raise AuthError.invalid_token()

        subject_id = payload.get("sub") or payload.get("user_id")
        if not subject_id:
            logger.warning("Token missing subject")
            raise AuthError.invalid_token()
        return Identity(subject_id=subject_id, email=payload.get("email"), claims=payload)

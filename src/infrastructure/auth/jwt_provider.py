"""JWT authentication provider for Supabase access tokens.

Supabase signs session tokens with ES256 (public keys published as JWKS);
locally issued tokens use HS256 with the shared secret. Relevant claims:

    {
        "sub": "user-uuid",
        "email": "user@example.com",          # absent for phone-only users
        "role": "authenticated",
        "user_metadata": {"first_name": "Ann"},
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# Metadata keys Supabase sign-up flows use for the user's given name
_NAME_KEYS = ("first_name", "given_name", "name", "full_name")


class JWKSKeySet:
    """Lazily fetched kid -> JWK mapping from the Supabase JWKS endpoint."""

    def __init__(self, url: str, timeout: float = settings.jwks_timeout_seconds) -> None:
        self._url = url
        self._timeout = timeout
        self._keys: dict[str, dict[str, Any]] | None = None

    async def get(self, kid: str) -> dict[str, Any] | None:
        """Look up a key, refetching once in case the keys were rotated."""
        keys = await self._load()
        if kid not in keys:
            self._keys = None
            keys = await self._load()
        return keys.get(kid)

    async def _load(self) -> dict[str, dict[str, Any]]:
        if self._keys is not None:
            return self._keys
        if not self._url:
            return {}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch JWKS from %s", self._url)
            return {}

        self._keys = {
            key["kid"]: key for key in payload.get("keys", []) if key.get("kid")
        }
        logger.info("Fetched %d JWKS keys from Supabase", len(self._keys))
        return self._keys


class JWTAuthProvider:
    """Validates Supabase (ES256) and locally issued (HS256) access tokens."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks: JWKSKeySet | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks = jwks or JWKSKeySet(settings.supabase_jwks_url)

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the principal.

        Anonymous-role tokens (the Supabase anon key) are rejected because
        they identify no user.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if not payload:
            return None

        subject = payload.get("sub")
        if not subject or payload.get("role") == "anon":
            return None

        try:
            user_id = UUID(subject)
        except ValueError:
            return None

        metadata = payload.get("user_metadata") or {}
        first_name = next(
            (metadata[key] for key in _NAME_KEYS if metadata.get(key)), None
        )

        return TokenUser(
            id=user_id,
            email=payload.get("email") or None,
            first_name=first_name,
            role=payload.get("role"),
        )

    async def _validate_es256(self, token: str, header: dict) -> Optional[dict]:
        """Verify an ES256 signature against the published JWKS."""
        kid = header.get("kid")
        if not kid:
            return None

        key_data = await self._jwks.get(kid)
        if not key_data:
            logger.warning("JWKS key not found for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Issue an HS256 token shaped like a Supabase session token."""
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "user_metadata": {"first_name": user.first_name},
        }
        if user.email:
            payload["email"] = user.email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

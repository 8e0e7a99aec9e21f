"""Authentication dependencies for FastAPI.

Every profile route acts on the caller's own row, so the only identity the
API trusts is the ``sub`` claim of a validated Supabase access token.
"""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# auto_error=False so a missing header renders our 401 envelope, not FastAPI's 403
security = HTTPBearer(auto_error=False, description="Supabase access token")


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Process-wide provider; holds the cached JWKS keys."""
    return JWTAuthProvider()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Resolve the signed-in user from the bearer token.

    Raises:
        AuthenticationError: UNAUTHORIZED without a token, INVALID_TOKEN when
            the token is expired, forged or belongs to the anon role
    """
    if credentials is None:
        raise AuthenticationError(
            message="Sign in to view your profile",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if user is None:
        logger.info("access_token_rejected")
        raise AuthenticationError(
            message="Your session has expired. Please sign in again.",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]

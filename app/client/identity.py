"""
Client-side identity: who is logged in, for deciding what to render.

The token is decoded without verification; the server verifies it on every
request, so nothing here is trusted for authorization.
"""

from typing import Optional

from jose import JWTError, jwt
import structlog

from app.client.api import ApiError, PlacementApiClient

logger = structlog.get_logger()


def get_user(api: PlacementApiClient) -> Optional[dict]:
    """Return the logged-in user's record with an `id` key, or None."""
    if not api.token:
        return None
    try:
        claims = jwt.get_unverified_claims(api.token)
        user = api.get_user(claims["sub"])
    except (JWTError, KeyError, ApiError) as e:
        logger.warning("client.identity_unavailable", error=str(e))
        return None
    user["id"] = claims["sub"]
    return user

"""
Authentication helpers.

Sign-in and sessions live with the external auth provider. The API only
decodes bearer tokens locally to attribute requests to a user in the logs.
"""
import logging
from typing import Optional

from authlib.jose import JoseError, jwt

from src.api.models.chat import User
from src.config.settings import get_settings

logger = logging.getLogger(__name__)


# ============================================================================
# JWT Decoding & Validation
# ============================================================================


def decode_jwt_local(token: str) -> Optional[dict]:
    """
    Decode and validate a Supabase JWT locally.

    Returns claims if valid, None if invalid, expired, or if no JWT secret is
    configured.
    """
    settings = get_settings()

    if not token or not settings.supabase_jwt_secret:
        return None

    try:
        claims = jwt.decode(token, settings.supabase_jwt_secret)

        try:
            claims.validate(
                leeway=120,  # Allow 2 minutes clock skew
                claims_options={"aud": {"essential": False}},
            )
            return dict(claims)
        except JoseError as e:
            logger.debug(f"JWT validation failed: {e}")
            return None
    except JoseError as e:
        logger.debug(f"JWT decode failed: {e}")
        return None
    except Exception as e:
        logger.warning(f"Unexpected error decoding JWT: {e}")
        return None


def user_from_token(token: str) -> Optional[User]:
    """Build a ``User`` from a bearer token's claims, or None if the token is not valid."""
    claims = decode_jwt_local(token)
    if not claims or not claims.get("sub"):
        return None
    return User(id=str(claims["sub"]), email=claims.get("email"))

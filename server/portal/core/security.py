"""Bearer token verification for the HTTP API."""

from typing import Any, Dict, Optional

import jwt

from portal.core.config import settings


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verified claims of a session token; None when the signature is bad or it has expired."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError:
        return None

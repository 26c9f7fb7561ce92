import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .container import Container
from .exceptions import AuthError
from .application.services.token_service import InvalidTokenError

logger = logging.getLogger(__name__)

# auto_error=False: absence is reported by require_user as 401, not HTTPBearer's 403
oauth2_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    container: Container = Depends(get_container),
) -> int:
    """User id from a valid bearer token. 401 when absent, 403 when invalid or expired."""
    if not credentials or not credentials.credentials:
        raise AuthError("Access token required", status_code=401)
    try:
        claim = container.tokens.verify(credentials.credentials)
    except InvalidTokenError:
        raise AuthError("Invalid or expired token", status_code=403)
    return claim.user_id


def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    container: Container = Depends(get_container),
) -> Optional[int]:
    """Like require_user, but any token problem just means anonymous."""
    if not credentials or not credentials.credentials:
        return None
    try:
        return container.tokens.verify(credentials.credentials).user_id
    except InvalidTokenError:
        logger.info("Ignoring invalid token on anonymous-capable endpoint")
        return None

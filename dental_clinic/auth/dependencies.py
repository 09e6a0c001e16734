"""
FastAPI dependencies for authenticating requests with access tokens.
"""
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from typing import List, Optional

from ..core.security import verify_access_token
from .exceptions import MissingTokenException, RoleDeniedException
from .models import Role
from .schemas import IdentityResponse

# Bearer token scheme; errors are raised by get_current_identity instead
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_current_identity(token: Optional[str] = Depends(oauth2_scheme)) -> IdentityResponse:
    """
    Get the identity carried by the request's access token.

    The token is trusted until it expires; no database lookup is made.

    Args:
        token: JWT access token from the Authorization header

    Returns:
        IdentityResponse: ``{id, name, role}`` from the token

    Raises:
        MissingTokenException: If no bearer token was sent (401)
        TokenInvalidException: If the token is invalid or expired (403)
    """
    if not token:
        raise MissingTokenException()
    claims = verify_access_token(token)
    return IdentityResponse(**claims)

def require_roles(allowed_roles: List[Role]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if the caller has a required role
    """
    def role_checker(identity: IdentityResponse = Depends(get_current_identity)) -> IdentityResponse:
        if identity.role not in allowed_roles:
            raise RoleDeniedException([role.value for role in allowed_roles], identity.role.value)
        return identity
    return role_checker

require_admin = require_roles([Role.ADMIN])

"""
Core security utilities for password handling and session tokens.

Sessions are stateless: an access token and a refresh token carrying the
same ``{id, name, role}`` claims, signed with two different secrets. Nothing
about a session is stored server side.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, NamedTuple, Tuple, Union
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
import logging

from ..config import settings
from ..auth.models import Role
from ..auth.exceptions import TokenInvalidException

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

CLAIM_FIELDS = ("id", "name", "role")
RESET_PURPOSE = "password_reset"


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash, False for a missing or unreadable hash
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be identified")
        return False

def token_claims(identity_id: str, name: Optional[str], role: Union[Role, str]) -> Dict[str, Any]:
    """Build the claim set carried by both session tokens."""
    return {"id": identity_id, "name": name, "role": Role(role).value}

def _encode(claims: Dict[str, Any], key: str, expires_delta: timedelta) -> str:
    to_encode = {field: claims.get(field) for field in CLAIM_FIELDS}
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, key, algorithm=settings.algorithm)

def _verify_signed(token: str, key: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        raise TokenInvalidException("Signature has expired.")
    except JWTError as e:
        raise TokenInvalidException(str(e))

    # jose accepts a token whose exp equals the current second
    exp = payload.get("exp")
    if exp is None or exp <= int(datetime.now(timezone.utc).timestamp()):
        raise TokenInvalidException("Signature has expired.")
    return payload

def _decode(token: str, key: str) -> Dict[str, Any]:
    payload = _verify_signed(token, key)

    if payload.get("purpose") or not payload.get("id") or not payload.get("role"):
        raise TokenInvalidException("Invalid token payload")
    try:
        Role(payload["role"])
    except ValueError:
        raise TokenInvalidException("Invalid token payload")

    return {field: payload.get(field) for field in CLAIM_FIELDS}

def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a short-lived access token.

    Args:
        claims: ``{id, name, role}`` claim set
        expires_delta: Token lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        str: Encoded JWT signed with ACCESS_TOKEN_KEY
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(claims, settings.access_token_key, lifetime)

def create_refresh_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a long-lived refresh token.

    Args:
        claims: ``{id, name, role}`` claim set
        expires_delta: Token lifetime (default: REFRESH_TOKEN_EXPIRE_DAYS)

    Returns:
        str: Encoded JWT signed with REFRESH_TOKEN_KEY
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(days=settings.refresh_token_expire_days)
    return _encode(claims, settings.refresh_token_key, lifetime)

def issue_tokens(identity_id: str, name: Optional[str], role: Union[Role, str]) -> TokenPair:
    """
    Mint an access/refresh pair for a verified identity.

    Both tokens carry the same claims; only lifetime and signing key differ.
    """
    claims = token_claims(identity_id, name, role)
    return TokenPair(create_access_token(claims), create_refresh_token(claims))

def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token.

    Raises:
        TokenInvalidException: On a bad signature, expiry, or malformed claims
    """
    return _decode(token, settings.access_token_key)

def verify_refresh_token(token: str) -> Dict[str, Any]:
    """
    Verify a refresh token.

    Raises:
        TokenInvalidException: On a bad signature, expiry, or malformed claims
    """
    return _decode(token, settings.refresh_token_key)

def renew_access_token(refresh_token: str) -> Tuple[str, Dict[str, Any]]:
    """
    Mint a fresh access token from a valid refresh token.

    The refresh token itself is not reissued.

    Returns:
        Tuple of (new access token, claims)

    Raises:
        TokenInvalidException: If the refresh token is rejected
    """
    claims = verify_refresh_token(refresh_token)
    return create_access_token(claims), claims

def create_reset_token(identity_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the token that authorises one identity to change its password.

    Issued after the security answers match. It carries ``sub`` and a
    ``purpose`` claim instead of session claims, so it is never accepted
    as an access token.

    Args:
        identity_id: Identifier whose password may be changed
        expires_delta: Token lifetime (default: PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)

    Returns:
        str: Encoded JWT signed with ACCESS_TOKEN_KEY
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.password_reset_token_expire_minutes)
    to_encode = {
        "sub": identity_id,
        "purpose": RESET_PURPOSE,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(to_encode, settings.access_token_key, algorithm=settings.algorithm)

def verify_reset_token(token: str, identity_id: str) -> None:
    """
    Check that a reset token is valid and was issued for ``identity_id``.

    Raises:
        TokenInvalidException: On a bad signature, expiry, wrong purpose or another identity
    """
    payload = _verify_signed(token, settings.access_token_key)
    if payload.get("purpose") != RESET_PURPOSE:
        raise TokenInvalidException("Invalid token payload")
    if payload.get("sub") != identity_id:
        logger.warning(f"Reset token for {payload.get('sub')} presented for {identity_id}")
        raise TokenInvalidException("Token was issued for another user")

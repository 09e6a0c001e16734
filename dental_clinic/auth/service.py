"""
Authentication service layer for business logic.
"""
import logging
from typing import Dict, Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.security import verify_password, issue_tokens, renew_access_token
from ..email_verification.service import is_email_pending_verification
from .roles import resolve_identity, accessor_for
from .exceptions import (
    IdentityNotFoundException,
    InvalidCredentialsException,
    UnverifiedEmailException
)

# Set up logging
logger = logging.getLogger(__name__)

async def login_user(
    db: Session,
    identifier: str,
    password: str
) -> Dict[str, Any]:
    """
    Authenticate an identity and mint a session token pair.

    The password is checked before the email verification gate, so only a
    caller who knows the password learns that the email is unverified.

    Args:
        db: Database session
        identifier: Role-table identifier
        password: Plain text password

    Returns:
        Dict with access_token, refresh_token and user ``{id, name, role}``

    Raises:
        IdentityNotFoundException: If no role table holds the identifier
        InvalidCredentialsException: If the stored password is missing or does not match
        UnverifiedEmailException: If the identity's email is pending verification
    """
    record, role = resolve_identity(db, identifier)

    if record is None:
        logger.warning(f"Login failed: {identifier} not found")
        raise IdentityNotFoundException()

    if not record.password:
        logger.warning(f"Login failed: {identifier} has no password set")
        raise InvalidCredentialsException()

    # bcrypt is CPU bound; keep it off the event loop
    password_ok = await run_in_threadpool(verify_password, password, record.password)
    if not password_ok:
        logger.warning(f"Login failed: invalid password for {identifier}")
        raise InvalidCredentialsException()

    if record.email and is_email_pending_verification(db, record.email):
        logger.info(f"Login refused: email not verified for {identifier}")
        raise UnverifiedEmailException(record.email)

    identity_id = accessor_for(role).primary_key(record)
    tokens = issue_tokens(identity_id, record.name, role)

    logger.info(f"Login successful: {role.value} {identity_id}")

    return {
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
        "user": {"id": identity_id, "name": record.name, "role": role.value}
    }

def refresh_session(refresh_token: str) -> Dict[str, Any]:
    """
    Re-mint an access token from a refresh token.

    The refresh token is only validated, never rotated.

    Args:
        refresh_token: Encoded refresh token taken from the cookie

    Returns:
        Dict with access_token and user ``{id, name, role}``

    Raises:
        TokenInvalidException: If the refresh token is malformed, forged or expired
    """
    access_token, claims = renew_access_token(refresh_token)
    logger.info(f"Access token refreshed for {claims['role']} {claims['id']}")
    return {"access_token": access_token, "user": claims}

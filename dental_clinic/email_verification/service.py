"""
Email verification service layer.

A row in ``email_verifications`` marks its email as unverified. Matching
the stored code consumes the row.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..config import settings
from ..auth.utils import generate_verification_code, send_verification_email
from ..auth.exceptions import (
    VerificationRecordExistsException,
    VerificationRecordNotFoundException,
    VerificationCodeInvalidException,
    VerificationCodeExpiredException
)
from .models import EmailVerification

# Set up logging
logger = logging.getLogger(__name__)


def get_verification(db: Session, email: str) -> Optional[EmailVerification]:
    return db.query(EmailVerification).filter(EmailVerification.email == email).first()

def list_verifications(db: Session) -> List[EmailVerification]:
    return db.query(EmailVerification).all()

def is_email_pending_verification(db: Session, email: str) -> bool:
    """True while a verification record exists for ``email``."""
    return get_verification(db, email) is not None

def _is_expired(record: EmailVerification) -> bool:
    ttl = settings.email_verification_ttl_minutes
    if not ttl or record.created_at is None:
        return False
    created_at = record.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc) >= created_at + timedelta(minutes=ttl)

def create_verification(db: Session, email: str) -> EmailVerification:
    """
    Start verification for an email.

    Args:
        db: Database session
        email: Address to verify

    Returns:
        The new EmailVerification row

    Raises:
        VerificationRecordExistsException: If a code is already pending for the email
    """
    if get_verification(db, email):
        logger.warning(f"Verification already pending for {email}")
        raise VerificationRecordExistsException()

    record = EmailVerification(
        email=email,
        code=generate_verification_code(),
        created_at=datetime.now(timezone.utc)
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"Verification code created for {email}")
    return record

def verify_code(db: Session, email: str, code: Union[str, int]) -> bool:
    """
    Consume a verification code.

    Args:
        db: Database session
        email: Address being verified
        code: Code submitted by the user

    Returns:
        True once the record has been deleted

    Raises:
        VerificationRecordNotFoundException: If nothing is pending for the email
        VerificationCodeExpiredException: If the code is older than the configured lifetime
        VerificationCodeInvalidException: If the code does not match
    """
    record = get_verification(db, email)
    if not record:
        logger.warning(f"Verification failed: no pending record for {email}")
        raise VerificationRecordNotFoundException()

    if _is_expired(record):
        logger.warning(f"Verification failed: expired code for {email}")
        raise VerificationCodeExpiredException()

    if str(code).strip() != record.code:
        logger.warning(f"Verification failed: invalid code for {email}")
        raise VerificationCodeInvalidException()

    db.delete(record)
    db.commit()
    logger.info(f"Email verified: {email}")
    return True

def update_code(db: Session, email: str, code: Optional[Union[str, int]] = None) -> EmailVerification:
    """
    Replace the pending code for an email.

    A new random code is generated when ``code`` is omitted. The issue time
    is reset either way.

    Raises:
        VerificationRecordNotFoundException: If nothing is pending for the email
    """
    record = get_verification(db, email)
    if not record:
        raise VerificationRecordNotFoundException()

    record.code = str(code) if code is not None else generate_verification_code()
    record.created_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(record)
    logger.info(f"Verification code replaced for {email}")
    return record

def delete_verification(db: Session, email: str) -> None:
    """
    Raises:
        VerificationRecordNotFoundException: If nothing is pending for the email
    """
    record = get_verification(db, email)
    if not record:
        raise VerificationRecordNotFoundException()
    db.delete(record)
    db.commit()

def dispatch_verification_email(email: str, code: str) -> None:
    """Background task: send the code, logging rather than raising on failure."""
    try:
        send_verification_email(email, code)
    except Exception as e:
        logger.error(f"Failed to send verification email to {email}: {str(e)}")

"""
Password reset by security questions.

The role table for an identifier is picked from its prefix through the
role registry, the same registry the login resolver uses.
"""
import logging
from typing import Any, Iterable, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.security import hash_password, verify_reset_token
from ..auth.roles import role_for_identifier, RoleAccessor
from ..auth.exceptions import (
    UnknownRoleException,
    IdentityNotFoundException,
    MissingTokenException,
    SecurityAnswersMismatchException
)
from .models import SecurityQuestion

# Set up logging
logger = logging.getLogger(__name__)


def list_security_questions(db: Session) -> List[SecurityQuestion]:
    return db.query(SecurityQuestion).order_by(SecurityQuestion.security_question_id).all()

def get_security_question(db: Session, question_id: int) -> Optional[SecurityQuestion]:
    return db.query(SecurityQuestion).filter(SecurityQuestion.security_question_id == question_id).first()

def _accessor_or_raise(user_id: str) -> RoleAccessor:
    accessor = role_for_identifier(user_id)
    if accessor is None:
        logger.warning(f"Password reset: no role matches identifier {user_id!r}")
        raise UnknownRoleException()
    return accessor

def verify_security_answers(
    db: Session,
    user_id: str,
    answers: Iterable[Tuple[int, str]]
) -> bool:
    """
    Check submitted security answers against the stored ones.

    Every submitted answer must match exactly. An empty submission never
    matches.

    Args:
        db: Database session
        user_id: Identifier whose prefix selects the role
        answers: ``(question_id, answer)`` pairs

    Returns:
        True if every answer matches

    Raises:
        UnknownRoleException: If the identifier prefix matches no role
        SecurityAnswersMismatchException: If any answer is missing or wrong
    """
    accessor = _accessor_or_raise(user_id)
    answers = list(answers)
    answers_model = accessor.answers_model
    owner_column = getattr(answers_model, accessor.primary_key_field)

    stored = {
        row.security_question_id: row.answer
        for row in db.query(answers_model).filter(owner_column == user_id).all()
    }

    if not answers or not all(stored.get(question_id) == answer for question_id, answer in answers):
        logger.warning(f"Password reset: security answers did not match for {user_id}")
        raise SecurityAnswersMismatchException()

    logger.info(f"Password reset: security answers verified for {user_id}")
    return True

async def change_password(
    db: Session,
    user_id: str,
    new_password: str,
    reset_token: Optional[str]
) -> Any:
    """
    Store a new password for an identity.

    Args:
        db: Database session
        user_id: Identifier whose prefix selects the role
        new_password: Plain text password to hash and store
        reset_token: Token issued by a successful answer check for ``user_id``

    Returns:
        The updated role-table row

    Raises:
        MissingTokenException: If no reset token was sent
        TokenInvalidException: If the reset token is expired, forged or for another identity
        UnknownRoleException: If the identifier prefix matches no role
        IdentityNotFoundException: If the role table has no such row
    """
    if not reset_token:
        logger.warning(f"Password reset: change requested for {user_id} without a reset token")
        raise MissingTokenException("Reset token required")
    verify_reset_token(reset_token, user_id)

    accessor = _accessor_or_raise(user_id)
    record = accessor.find_by_primary_key(db, user_id)
    if record is None:
        logger.warning(f"Password reset: {user_id} not found in {accessor.table_name}")
        raise IdentityNotFoundException()

    record.password = await run_in_threadpool(hash_password, new_password)
    db.commit()
    logger.info(f"Password changed for {accessor.role.value} {user_id}")
    return record

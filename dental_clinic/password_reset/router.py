"""
Password reset and security question routes.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import logging

from ..database import get_db
from ..core.security import create_reset_token
from ..auth.utils import send_password_changed_notification
from ..auth.exceptions import (
    UnknownRoleException,
    IdentityNotFoundException,
    MissingTokenException,
    TokenInvalidException,
    SecurityAnswersMismatchException
)
from .schemas import SecurityAnswersCheck, SecurityAnswersResult, PasswordChange, SecurityQuestionResponse
from .service import list_security_questions, get_security_question, verify_security_answers, change_password

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reset-password", tags=["Password Reset"])
questions_router = APIRouter(prefix="/security-questions", tags=["Security Questions"])

def _notify_password_changed(email: str, name: str) -> None:
    try:
        send_password_changed_notification(email, name)
    except Exception as e:
        logger.error(f"Failed to send password changed notification: {str(e)}")

@questions_router.get("", response_model=List[SecurityQuestionResponse])
async def security_questions_route(db: Session = Depends(get_db)):
    return list_security_questions(db)

@questions_router.get("/{security_question_id}", response_model=SecurityQuestionResponse)
async def security_question_route(security_question_id: int, db: Session = Depends(get_db)):
    question = get_security_question(db, security_question_id)
    if not question:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return question

@router.post("")
async def verify_answers_route(data: SecurityAnswersCheck, db: Session = Depends(get_db)):
    """
    Check security answers before allowing a password change.

    Returns:
        ``{success: true, resetToken}``; 400 for an unrecognised id prefix;
        401 ``{success: false, message}`` when answers do not match
    """
    try:
        verify_security_answers(
            db,
            data.user_id,
            [(q.question_id, q.answer) for q in data.questions]
        )
    except UnknownRoleException as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except SecurityAnswersMismatchException as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "message": e.detail})
    except Exception as e:
        logger.error(f"Unexpected error verifying security answers: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error verifying answers"
        )
    result = SecurityAnswersResult(reset_token=create_reset_token(data.user_id))
    return result.model_dump(by_alias=True)

@router.post("/change")
async def change_password_route(
    data: PasswordChange,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    """
    Replace a password. Requires the ``resetToken`` from ``POST /reset-password``
    for the same ``userID``: 401 without one, 403 if it is expired or for another id.
    """
    try:
        record = await change_password(db, data.user_id, data.password, data.reset_token)
    except (MissingTokenException, TokenInvalidException, UnknownRoleException, IdentityNotFoundException) as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except Exception as e:
        logger.error(f"Unexpected error changing password: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error changing password"
        )

    if record.email:
        background_tasks.add_task(_notify_password_changed, record.email, record.name)
    return {"message": "Password updated"}

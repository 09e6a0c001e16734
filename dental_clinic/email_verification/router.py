"""
Email verification routes.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import logging

from ..database import get_db
from ..auth.dependencies import require_admin
from ..auth.exceptions import (
    VerificationRecordExistsException,
    VerificationRecordNotFoundException,
    VerificationCodeInvalidException,
    VerificationCodeExpiredException
)
from .schemas import VerificationCreate, VerificationCheck, VerificationUpdate, VerificationResponse
from .service import (
    get_verification, list_verifications, create_verification, verify_code,
    update_code, delete_verification, dispatch_verification_email
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email-verification", tags=["Email Verification"])

@router.get("", response_model=List[VerificationResponse], dependencies=[Depends(require_admin)])
async def list_verifications_route(db: Session = Depends(get_db)):
    """List pending verifications. Admin only."""
    return list_verifications(db)

@router.get("/{email}", response_model=VerificationResponse, dependencies=[Depends(require_admin)])
async def get_verification_route(email: str, db: Session = Depends(get_db)):
    """Read one pending verification, code included. Admin only."""
    record = get_verification(db, email)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return record

@router.post("/verify")
async def verify_route(data: VerificationCheck, db: Session = Depends(get_db)):
    """
    Check a code and consume the pending record on success.

    Returns:
        ``true`` on success; ``false`` with 400 on a wrong code;
        409 if nothing is pending; 410 if the code has expired
    """
    try:
        return verify_code(db, data.email, data.code)
    except VerificationCodeInvalidException:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=False)
    except (VerificationRecordNotFoundException, VerificationCodeExpiredException) as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except Exception as e:
        logger.error(f"Unexpected error during email verification: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify email"
        )

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_verification_route(
    data: VerificationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    """
    Start verification for an email and send the code in the background.
    """
    try:
        record = create_verification(db, data.email)
    except VerificationRecordExistsException as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except Exception as e:
        logger.error(f"Unexpected error creating email verification: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create email verification"
        )

    background_tasks.add_task(dispatch_verification_email, record.email, record.code)
    return "Created Successfully"

@router.put("/{email}", response_model=VerificationResponse, dependencies=[Depends(require_admin)])
async def update_verification_route(
    email: str,
    data: VerificationUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    """
    Replace the pending code. Admin only.

    A generated code is emailed; an explicit one is not.
    """
    try:
        record = update_code(db, email, data.code)
    except VerificationRecordNotFoundException:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    if data.code is None:
        background_tasks.add_task(dispatch_verification_email, record.email, record.code)
    return record

@router.delete("/{email}", dependencies=[Depends(require_admin)])
async def delete_verification_route(email: str, db: Session = Depends(get_db)):
    try:
        delete_verification(db, email)
    except VerificationRecordNotFoundException:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return {"message": "Deleted"}

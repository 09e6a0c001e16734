"""
Email verification request/response schemas.
"""
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel

class VerificationCreate(BaseModel):
    email: str

class VerificationCheck(BaseModel):
    """
    Fields:
    - email: Address being verified
    - code: Code from the email; numbers and numeric strings are both accepted
    """
    email: str
    code: Union[int, str]

class VerificationUpdate(BaseModel):
    """Replacement code; omit to have a new one generated and emailed."""
    code: Optional[Union[int, str]] = None

class VerificationResponse(BaseModel):
    email: str
    code: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

"""
Password reset schemas. Field names match the frontend's request bodies.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

class SecurityAnswer(BaseModel):
    question_id: int = Field(..., alias="security_question_id")
    answer: str

    class Config:
        populate_by_name = True

class SecurityAnswersCheck(BaseModel):
    """
    Fields:
    - userID: Identifier whose prefix selects the role table
    - questions: Answers to check against the stored ones
    """
    user_id: str = Field(..., alias="userID")
    questions: List[SecurityAnswer]

    class Config:
        populate_by_name = True

class SecurityAnswersResult(BaseModel):
    """Successful answer check; ``resetToken`` authorises the password change."""
    success: bool = True
    reset_token: str = Field(..., alias="resetToken")

    class Config:
        populate_by_name = True

class PasswordChange(BaseModel):
    """
    Fields:
    - userID: Identifier whose password is replaced
    - password: New password, at least 8 characters
    - resetToken: Token returned by a successful answer check for the same userID
    """
    user_id: str = Field(..., alias="userID")
    password: str = Field(..., min_length=8)
    reset_token: Optional[str] = Field(None, alias="resetToken")

    class Config:
        populate_by_name = True

class SecurityQuestionResponse(BaseModel):
    security_question_id: int
    question: str

    class Config:
        from_attributes = True

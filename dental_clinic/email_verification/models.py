"""
Email Verification Model - Pending verification codes keyed by email.

A row existing for an email means that email is still unverified. The row
is deleted when the matching code is submitted.
"""
from sqlalchemy import Column, String, DateTime, func
from ..database import Base


class EmailVerification(Base):
    """
    Fields:
    - email: Address awaiting verification (primary key)
    - code: Six digit numeric code sent to the address
    - created_at: When the code was issued
    """
    __tablename__ = "email_verifications"

    email = Column(String, primary_key=True, index=True)
    code = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<EmailVerification(email='{self.email}')>"

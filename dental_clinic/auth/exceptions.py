"""
Authentication-specific exceptions.
"""
from fastapi import HTTPException, status

class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class IdentityNotFoundException(AuthException):
    """Exception raised when an identifier is not found in any role table."""
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InvalidCredentialsException(AuthException):
    """
    Exception raised when the stored password is missing or does not match.

    The login route answers it with HTTP 200 and ``successful: false``; the
    401 here only applies where the exception propagates unhandled.
    """
    def __init__(self, detail: str = "Invalid password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class UnverifiedEmailException(AuthException):
    """Exception raised when credentials are correct but the email is still pending verification."""
    def __init__(self, email: str, detail: str = "Please verify your email before logging in"):
        self.email = email
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class TokenInvalidException(AuthException):
    """Exception raised when a token fails signature or expiry checks."""
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class MissingTokenException(AuthException):
    """Exception raised when a protected route is called without a bearer token."""
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class RoleDeniedException(AuthException):
    """Exception raised when user doesn't have required role."""
    def __init__(self, required_roles: list, user_role: str):
        detail = f"Access denied. Required roles: {required_roles}. Your role: {user_role}"
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class VerificationRecordExistsException(AuthException):
    """Exception raised when a verification code is requested twice for one email."""
    def __init__(self, detail: str = "Verification for this email already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class VerificationRecordNotFoundException(AuthException):
    """Exception raised when no verification record exists for an email."""
    def __init__(self, detail: str = "No record found"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class VerificationCodeInvalidException(AuthException):
    """Exception raised when verification code is invalid."""
    def __init__(self, detail: str = "Invalid verification code"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class VerificationCodeExpiredException(AuthException):
    """Exception raised when verification code is older than the configured lifetime."""
    def __init__(self, detail: str = "Verification code has expired"):
        super().__init__(status_code=status.HTTP_410_GONE, detail=detail)

class UnknownRoleException(AuthException):
    """Exception raised when an identifier prefix matches no role."""
    def __init__(self, detail: str = "Invalid user role."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class SecurityAnswersMismatchException(AuthException):
    """Exception raised when security answers do not match the stored ones."""
    def __init__(self, detail: str = "Answers do not match."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

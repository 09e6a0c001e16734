"""
Authentication Schemas - Pydantic models for the login, refresh and logout routes.

Field names are snake_case in Python and camelCase on the wire to stay
compatible with the existing frontend.
"""
from typing import Optional, Union
from pydantic import BaseModel, Field, validator
from .models import Role

class LoginRequest(BaseModel):
    """
    Login Request Schema

    Fields:
    - id: Role-table identifier such as knrsdent001; numbers are read as strings
    - password: Plain text password
    - checked: "Remember me"; makes the refresh cookie persistent
    """
    id: Union[str, int]
    password: str
    checked: Optional[bool] = False

    @validator("id")
    def id_as_string(cls, v):
        return str(v)

class IdentityResponse(BaseModel):
    """
    Identity carried in session tokens and returned to the client

    Fields:
    - id: Value of the role table's primary key
    - name: Display name
    - role: Role table the identity lives in
    """
    id: str
    name: Optional[str] = None
    role: Role

class LoginResponse(BaseModel):
    """
    Login Response Schema

    Every login outcome except "user not found" uses this shape with HTTP 200;
    ``successful`` tells the client whether tokens were issued.
    """
    successful: bool
    message: str
    access_token: Optional[str] = Field(None, alias="accessToken")
    user: Optional[IdentityResponse] = None
    needs_verification: Optional[bool] = Field(None, alias="needsVerification")
    email: Optional[str] = None

    class Config:
        populate_by_name = True

class RefreshResponse(BaseModel):
    """Fresh access token minted from the refresh cookie."""
    access_token: str = Field(..., alias="accessToken")
    user: IdentityResponse

    class Config:
        populate_by_name = True

class MessageResponse(BaseModel):
    message: str

"""
Authentication routes: login, silent refresh and logout.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..config import settings
from .schemas import LoginRequest, LoginResponse, RefreshResponse, MessageResponse
from .service import login_user, refresh_session
from .utils import set_refresh_cookie, clear_refresh_cookie
from .exceptions import (
    IdentityNotFoundException,
    InvalidCredentialsException,
    UnverifiedEmailException,
    TokenInvalidException
)

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True, summary="User Login")
async def login_route(
    login_data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    User login endpoint.

    Unknown identifiers get a 404. Wrong or missing passwords and unverified
    emails are reported with HTTP 200 and ``successful: false``; the
    refresh cookie is only set on success.

    Args:
        login_data: Identifier, password and "remember me" flag
        response: Outgoing response, used to set the refresh cookie
        db: Database session

    Returns:
        LoginResponse with access token and identity on success
    """
    try:
        result = await login_user(
            db=db,
            identifier=login_data.id,
            password=login_data.password
        )
    except IdentityNotFoundException as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"successful": False, "message": e.detail}
        )
    except InvalidCredentialsException as e:
        return LoginResponse(successful=False, message=e.detail)
    except UnverifiedEmailException as e:
        return LoginResponse(
            successful=False,
            message=e.detail,
            needs_verification=True,
            email=e.email
        )
    except Exception as e:
        logger.error(f"Unexpected error during login: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during login"
        )

    set_refresh_cookie(response, result["refresh_token"], persistent=bool(login_data.checked))

    return LoginResponse(
        successful=True,
        message="Login successful",
        access_token=result["access_token"],
        user=result["user"]
    )

@router.get("/refresh_token", summary="Refresh Access Token")
async def refresh_token_route(request: Request):
    """
    Silent refresh endpoint.

    Reads the refresh cookie and mints a new access token without asking for
    the password again.

    Returns:
        ``{accessToken, user}`` on success, the literal ``false`` when no
        cookie was sent, or 403 ``{error}`` when the cookie is rejected
    """
    token = request.cookies.get(settings.refresh_cookie_name)
    if not token:
        return False

    try:
        result = refresh_session(token)
    except TokenInvalidException as e:
        logger.warning(f"Refresh rejected: {e.detail}")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": e.detail}
        )
    except Exception as e:
        logger.error(f"Unexpected error during token refresh: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during token refresh"
        )

    return RefreshResponse(
        access_token=result["access_token"],
        user=result["user"]
    ).model_dump(by_alias=True, mode="json")

@router.delete("/delete_token", response_model=MessageResponse, summary="Logout")
@router.post("/delete_token", response_model=MessageResponse, include_in_schema=False)
async def delete_token_route(response: Response):
    """
    Logout endpoint.

    Clears the refresh cookie. Sessions are not stored server side, so there
    is nothing else to revoke and calling this repeatedly is harmless.
    """
    clear_refresh_cookie(response)
    return {"message": "Refresh token deleted"}

"""
Authentication endpoints - e-mail + password against the users collection.

Separate login routes exist for the admin, NGO and government portals; each
only admits the matching roles.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.models.base import BaseResponse
from app.models.user import SignupRequest, LoginRequest, AuthResponse, UserResponse
from app.routes.deps import get_current_user, get_token
from app.services.auth_service import AuthError, get_auth_service
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

AUTH_ERROR_STATUS = {
    "user-not-found": status.HTTP_401_UNAUTHORIZED,
    "wrong-password": status.HTTP_401_UNAUTHORIZED,
    "user-disabled": status.HTTP_403_FORBIDDEN,
    "access-denied": status.HTTP_403_FORBIDDEN,
    "email-already-in-use": status.HTTP_409_CONFLICT,
}


def _auth_response(result: Dict, message: str) -> AuthResponse:
    return AuthResponse(
        success=True,
        message=message,
        user=UserResponse(**result["user"]),
        token=result["token"],
        expires_at=result["expires_at"],
    )


def _raise_auth_error(e: AuthError):
    raise HTTPException(
        status_code=AUTH_ERROR_STATUS.get(e.code, status.HTTP_401_UNAUTHORIZED),
        detail={"code": e.code, "message": e.message},
    )


def _login(request: LoginRequest, portal: Optional[str]) -> AuthResponse:
    try:
        result = get_auth_service().login(request.email, request.password, portal=portal)
        return _auth_response(result, "Login successful")
    except AuthError as e:
        _raise_auth_error(e)
    except Exception as e:
        logger.error(f"❌ Login failed unexpectedly: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Login failed: {str(e)}"
        )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    """
    Create a citizen account and return a session token.
    """
    try:
        result = get_auth_service().signup(request.email, request.password, request.name)
        return _auth_response(result, "Account created successfully")
    except AuthError as e:
        _raise_auth_error(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Signup failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Signup failed: {str(e)}"
        )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """Citizen app login (any active account)."""
    return _login(request, None)


@router.post("/admin-login", response_model=AuthResponse)
async def admin_login(request: LoginRequest):
    return _login(request, "admin")


@router.post("/ngo-login", response_model=AuthResponse)
async def ngo_login(request: LoginRequest):
    return _login(request, "ngo")


@router.post("/government-login", response_model=AuthResponse)
async def government_login(request: LoginRequest):
    return _login(request, "government")


@router.post("/logout", response_model=BaseResponse)
async def logout(token: str = Depends(get_token)):
    get_auth_service().logout(token)
    return BaseResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def me(user: Dict = Depends(get_current_user)):
    """The user behind the bearer token."""
    return user

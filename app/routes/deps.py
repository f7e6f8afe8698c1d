"""
Shared route dependencies: bearer-token sessions and permission checks.
"""

from typing import Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.services.auth_service import AuthError, get_auth_service

security = HTTPBearer(auto_error=False)


def get_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(token: str = Depends(get_token)) -> Dict:
    try:
        return get_auth_service().resolve_session(token)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": e.code, "message": e.message},
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_permission(*permissions: str):
    """
    Dependency factory: the current user must hold at least one of `permissions`.
    """

    def checker(user: Dict = Depends(get_current_user)) -> Dict:
        granted = set(user.get("permissions") or [])
        if not granted.intersection(permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: one of {sorted(permissions)} required",
            )
        return user

    return checker

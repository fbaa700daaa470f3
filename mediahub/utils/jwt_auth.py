"""
JWT bearer-token gate for mutating endpoints.
Tokens are issued by POST /api/v1/auth/login and checked by require_auth.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status, Header, Request
from mediahub.config import settings
from mediahub.utils.auth import verify_admin_password


ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
TOKEN_COOKIE_NAME = "cms_token"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    Args:
        data: Claims to include in token
        expires_delta: Optional custom lifetime (default: 60 minutes)
    """
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update({
        "exp": now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)),
        "iat": now,
        "type": "access",
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode an access token.

    Raises:
        HTTPException: 401 if token is invalid, expired, or not an access token
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid token", "Authentication token is invalid or expired")

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type", "Token is not an access token")

    return payload


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    # Bearer header first, then the httpOnly cookie set by the login route
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
            return parts[1]
    return request.cookies.get(TOKEN_COOKIE_NAME)


def require_token(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token for authentication"),
) -> dict:
    """FastAPI dependency that always demands a valid token."""
    token = _extract_token(request, authorization)
    if not token:
        raise _unauthorized("Missing token", "Authentication required")
    return verify_token(token)


def require_auth(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token for authentication"),
) -> dict:
    """
    FastAPI dependency guarding write endpoints.
    With AUTH_ENABLED off every request passes as an anonymous admin.
    """
    if not settings.AUTH_ENABLED:
        return {"sub": "anonymous", "role": "admin"}
    return require_token(request, authorization)


def authenticate_admin(password: str) -> dict:
    """
    Check the admin password and return the claims for a new token.

    Raises:
        HTTPException: 401 if password is invalid, 500 if no hash is configured
    """
    try:
        valid = verify_admin_password(password)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Authentication not configured", "message": "ADMIN_PASSWORD_HASH is not set"},
        )

    if not valid:
        raise _unauthorized("Invalid credentials", "Incorrect password")

    return {"role": "admin", "sub": "cms_admin"}

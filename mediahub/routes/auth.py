"""
Login and token check routes.
"""
from fastapi import APIRouter, Depends, Request, Response
import logging

from mediahub.schemas import LoginRequest, TokenResponse
from mediahub.utils.jwt_auth import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    TOKEN_COOKIE_NAME,
    authenticate_admin,
    create_access_token,
    require_token,
)
from mediahub.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# Mounted without the API prefix
root_router = APIRouter(tags=["auth"])


@router.post("/auth/login", response_model=TokenResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, response: Response, payload: LoginRequest):
    """
    Exchange the admin password for an access token.

    The token is returned in the body and also set as an httpOnly cookie.

    Raises:
        HTTPException: 401 on a wrong password, 429 when rate limited
    """
    claims = authenticate_admin(payload.password)
    token = create_access_token(claims)
    expires_in = ACCESS_TOKEN_EXPIRE_MINUTES * 60

    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=expires_in,
        httponly=True,
        samesite="lax",
    )
    logger.info(f"Issued access token for {claims['sub']}")
    return TokenResponse(access_token=token, expires_in=expires_in)


@root_router.get("/authorized")
async def authorized(claims: dict = Depends(require_token)):
    """Succeeds only with a valid token, regardless of AUTH_ENABLED."""
    return {"authorized": True, "sub": claims.get("sub")}

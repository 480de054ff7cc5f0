"""
JWT Authentication Module for Well Pump Estimator API
Provides bearer token verification and role checks
"""

from typing import Dict, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.config import config
from api.security_config import JWT_ALGORITHM

# HTTP Bearer security scheme
security = HTTPBearer()


def verify_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Dict[str, Any]:
    """
    Verify a signed JWT bearer token

    Args:
        credentials: HTTP Bearer credentials from request header

    Returns:
        Decoded JWT payload with user information

    Raises:
        HTTPException: 500 if JWT secret not configured
        HTTPException: 401 if token is invalid or expired
    """
    if not config.JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "code": "JWT_NOT_CONFIGURED",
                "message": "JWT secret not configured",
                "hint": "Set JWT_SECRET environment variable"
            }
        )

    token = credentials.credentials

    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=config.JWT_AUD
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "TOKEN_EXPIRED",
                "message": "Token has expired",
                "hint": "Please login again to get a new token"
            }
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "INVALID_TOKEN",
                "message": "Invalid authentication token",
                "hint": str(e)
            }
        )


def get_current_user(token_payload: Dict[str, Any] = Depends(verify_token)) -> Dict[str, Any]:
    """
    Extract current user information from verified token

    Args:
        token_payload: Decoded JWT payload

    Returns:
        User information dictionary
    """
    return {
        "user_id": token_payload.get("sub"),
        "email": token_payload.get("email"),
        "role": token_payload.get("role", "authenticated")
    }

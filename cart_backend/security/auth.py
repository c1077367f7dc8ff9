"""
Bearer token verification

Cart routes require a JWT issued by the auth service. The token's subject
identifies whose cart is being read or changed.
"""

import os
import logging
from typing import Optional

import jwt
from fastapi import Header, HTTPException

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-this-secret"


def get_jwt_secret() -> str:
    """Shared secret used to verify access tokens"""
    return os.getenv("CART_JWT_SECRET", DEFAULT_SECRET)


class BearerAuth:
    """
    FastAPI dependency resolving the authenticated user id.

    Any missing, malformed, expired or badly signed token is answered with
    401 so the client can drop its credential and ask the user to sign in.
    """

    def __init__(self, secret: Optional[str] = None, algorithms: tuple[str, ...] = ("HS256",)):
        """
        Args:
            secret: Verification key; read from CART_JWT_SECRET when omitted
            algorithms: Accepted signing algorithms
        """
        self.secret = secret
        self.algorithms = algorithms

    async def __call__(self, authorization: Optional[str] = Header(None)) -> str:
        if not authorization or not authorization.lower().startswith("bearer "):
            raise _unauthorized("Missing bearer token")

        token = authorization.split(" ", 1)[1].strip()
        try:
            claims = jwt.decode(token, self.secret or get_jwt_secret(), algorithms=list(self.algorithms))
        except jwt.ExpiredSignatureError:
            raise _unauthorized("Token expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise _unauthorized("Invalid token")

        user_id = claims.get("sub") or claims.get("id")
        if not user_id:
            raise _unauthorized("Token has no subject")
        return str(user_id)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# Dependency instance
require_user = BearerAuth()

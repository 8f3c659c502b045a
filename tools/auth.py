import os
from typing import Any, Dict

import jwt
from fastapi import HTTPException, Request
from loguru import logger


def current_user(request: Request) -> Dict[str, Any]:
    """
    Resolve the authenticated user from the bearer token.

    The token is an HS256 JWT signed with JWT_SECRET carrying `userId`
    (or `sub`), and optionally `email` and `name`.
    """
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise HTTPException(status_code=500, detail="Auth secret not configured")

    auth_header = request.headers.get("Authorization") or ""
    if not auth_header.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="No token, authorization denied")

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="No token, authorization denied")

    try:
        payload = jwt.decode(token, secret, algorithms=["HS256"], options={"verify_aud": False})
    except jwt.PyJWTError as e:
        logger.warning(f"Token rejected: {e}")
        raise HTTPException(status_code=401, detail="Token is not valid") from e

    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token is not valid")

    return {
        "id": str(user_id),
        "email": payload.get("email", ""),
        "name": payload.get("name", ""),
    }

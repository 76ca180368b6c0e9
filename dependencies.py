import logging
from typing import Annotated

from fastapi import Request, Depends, HTTPException
from firebase_admin.auth import verify_id_token

from services.posts import PostStore

logger = logging.getLogger(__name__)


def get_current_user(request: Request) -> str:
    """
    Verify Firebase ID token from Authorization header and return the caller's uid
    """
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header"
        )

    token = authorization.split("Bearer ")[1]
    try:
        decoded_token = verify_id_token(token, check_revoked=True, clock_skew_seconds=10)
        return decoded_token["uid"]
    except Exception as e:
        logger.error("Invalid authentication token: %s", e)
        raise HTTPException(
            status_code=401,
            detail=f"Invalid authentication token: {str(e)}"
        )


def get_post_store(request: Request) -> PostStore:
    """Get post store from app state"""
    return request.app.state.post_store


CurrentUser = Annotated[str, Depends(get_current_user)]
Posts = Annotated[PostStore, Depends(get_post_store)]

"""
Firebase ID token verification for authenticated routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, HTTPException
from firebase_admin import auth

from backend.dependencies import get_firebase_app
from shared.types import AuthUser

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def verify_id_token(id_token: str) -> AuthUser:
    """
    Verifies a Firebase ID token and returns the identity it carries.

    Raises:
        ValueError: If the token is malformed.
        firebase_admin.auth.InvalidIdTokenError: If the token is rejected.
    """
    claims = auth.verify_id_token(id_token, app=get_firebase_app())
    return AuthUser(
        uid=claims["uid"],
        display_name=claims.get("name"),
        email=claims.get("email"),
        photo_url=claims.get("picture"),
    )


def get_current_user(
    authorization: Optional[str] = Header(default=None),
) -> AuthUser:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        return verify_id_token(token)
    except (ValueError, auth.InvalidIdTokenError, auth.CertificateFetchError) as e:
        logger.warning("Rejected ID token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid ID token") from e

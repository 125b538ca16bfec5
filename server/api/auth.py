# server/api/auth.py

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, status

from api.deps import get_credential_service, get_current_user, get_token_service, read_payload
from core.credentials import CredentialService
from core.errors import InfrastructureError
from core.store import StoreError
from core.tokens import Claims, TokenService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    payload: dict = Depends(read_payload),
    credentials: CredentialService = Depends(get_credential_service),
):
    """
    Creates a user account. Duplicate username/email and constraint
    violations are reported as 400.
    """
    try:
        user_id = credentials.register(
            payload.get("username"),
            payload.get("email"),
            payload.get("password"),
        )
    except StoreError as e:
        raise InfrastructureError("Server error during registration", detail=str(e))
    return {"message": "User registered successfully!", "userId": user_id}


@router.post("/login")
def login(
    payload: dict = Depends(read_payload),
    credentials: CredentialService = Depends(get_credential_service),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        user_id = credentials.verify(payload.get("username"), payload.get("password"))
    except StoreError as e:
        raise InfrastructureError("Server error during login", detail=str(e))

    token = tokens.issue(user_id, payload["username"])
    logger.info(f"User {payload['username']} logged in")
    return {"message": "Login successful!", "token": token}


@router.get("/protected")
def protected(current_user: Claims = Depends(get_current_user)):
    return {
        "message": "This is a protected resource!",
        "user": current_user.to_public(),
        "accessTime": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }

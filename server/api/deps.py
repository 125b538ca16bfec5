# server/api/deps.py

import json
from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.credentials import CredentialService
from core.errors import ValidationError
from core.store import DocumentStore
from core.tokens import Claims, TokenService
from database import get_db
from models.product import Product
from models.user import User


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_service(request: Request, db: Session = Depends(get_db)) -> CredentialService:
    return CredentialService(DocumentStore(db, User), request.app.state.pwd_context)


def get_product_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db, Product)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Returns the token part of an `Authorization: Bearer <token>` header.
    Anything without a second part counts as no token at all.
    """
    if not authorization:
        return None
    parts = authorization.split()
    return parts[1] if len(parts) > 1 else None


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    """
    Gate for protected routes.
    No token -> 401, bad or expired token -> 403, otherwise the decoded
    claims are attached to request.state.user and handed to the route.
    """
    claims = tokens.verify(extract_bearer_token(authorization))
    request.state.user = claims
    return claims


async def read_payload(request: Request) -> dict:
    """
    Request body as a dict, from either a JSON object or form fields.
    Declared after the auth gate on protected routes, so a missing token
    is reported before a malformed body.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        raise ValidationError("Invalid JSON body.")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload

# server/core/tokens.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from config import Settings
from core.errors import InvalidTokenError, MissingTokenError


logger = logging.getLogger(__name__)


class Claims(BaseModel):
    user_id: str
    username: str
    issued_at: int
    expires_at: int

    def to_public(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


class TokenService:
    """
    Issues and checks stateless session tokens (signed JWTs).
    Validity depends only on the signature and the `exp` claim.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(self, user_id: str, username: str, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": user_id,
            "userId": user_id,
            "username": username,
            "iat": issued,
            "exp": issued + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Claims:
        if not token:
            raise MissingTokenError()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("Token verification failed: token expired")
            raise InvalidTokenError()
        except JWTError as e:
            logger.warning(f"Token verification failed: {e}")
            raise InvalidTokenError()

        user_id = payload.get("userId")
        username = payload.get("username")
        if not user_id or not username or "exp" not in payload:
            logger.warning("Token verification failed: missing identity claims")
            raise InvalidTokenError()

        return Claims(
            user_id=user_id,
            username=username,
            issued_at=payload.get("iat", 0),
            expires_at=payload["exp"],
        )

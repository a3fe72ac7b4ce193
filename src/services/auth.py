"""
Password hashing and bearer tokens.

Tokens are stateless HS256 JWTs whose only authorization claim is the
user id (``sub``). Verifying a token never touches the database.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import Settings
from src.errors import UnauthenticatedError


bearer_scheme = HTTPBearer(auto_error=False)


# ===== PASSWORD HASHING UTILITIES =====

def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


# ===== TOKENS =====

class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expires_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = timedelta(days=expires_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expires_days)

    def issue(self, user_id: UUID) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> UUID:
        """
        Return the user id carried by a token.

        Missing, malformed, expired and tampered tokens all fail the same way.

        Raises:
            UnauthenticatedError
        """
        if not token:
            raise UnauthenticatedError()
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
            return UUID(payload["sub"])
        except (jwt.InvalidTokenError, ValueError, TypeError) as e:
            raise UnauthenticatedError() from e


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> UUID:
    """Resolve the caller from the Authorization: Bearer header."""
    token = credentials.credentials if credentials else None
    return token_service.verify(token)

import uuid
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from .config import settings
from .errors import ExpiredToken, InvalidToken
from .models import TokenPayload, User

ALGORITHM = "HS256"
MIN_KEY_BYTES = 32


class TokenService:
    """Mints and verifies signed access tokens carrying `(user_id, role)`."""

    def __init__(self, symmetric_key: str, duration: timedelta):
        if len(symmetric_key.encode("utf-8")) < MIN_KEY_BYTES:
            raise ValueError(f"token key must be at least {MIN_KEY_BYTES} bytes")
        self._key = symmetric_key
        self.duration = duration

    @classmethod
    def from_settings(cls) -> "TokenService":
        return cls(settings.token_key, timedelta(minutes=settings.access_token_minutes))

    def create_token(self, user: User, duration: timedelta = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "jti": str(uuid.uuid4()),
            "sub": str(user.id),
            "role": user.role,
            "iat": int(now.timestamp()),
            "exp": int((now + (duration or self.duration)).timestamp()),
        }
        return jwt.encode(claims, self._key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        try:
            claims = jwt.decode(token, self._key, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            raise ExpiredToken()
        except JWTError:
            raise InvalidToken()
        try:
            return TokenPayload(id=claims.get("jti"), user_id=claims.get("sub"), role=claims.get("role"))
        except ValidationError:
            raise InvalidToken()

from typing import Optional
from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def is_password_hash(value: Optional[str]) -> bool:
    if not value:
        return False
    return _pwd_context.identify(value) is not None


def hash_password(password: str) -> str:
    # Callers pass plaintext only; a plaintext shaped like a hash is still plaintext.
    return _pwd_context.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not is_password_hash(hashed):
        return False
    return _pwd_context.verify(password, hashed)

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings, settings as default_settings


@lru_cache
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    return _pwd_context(rounds or default_settings.bcrypt_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # o custo vem gravado no próprio hash
    return _pwd_context(default_settings.bcrypt_rounds).verify(plain_password, hashed_password)


def create_access_token(subject: str, settings: Settings = default_settings) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": subject, "exp": expire, "iss": settings.token_issuer}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings = default_settings) -> str | None:
    """Devolve o login do token, ou None se inválido/expirado."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=settings.token_issuer,
        )
    except JWTError:
        return None
    sub = payload.get("sub")
    return str(sub) if sub else None

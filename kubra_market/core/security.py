import uuid
import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from kubra_market.core.config import settings

# bcrypt for password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def create_session_token(merchant_id: int, session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign the cookie value: the session id plus the merchant it was issued to.
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.SESSION_EXPIRE_DAYS)

    to_encode = {
        "exp": expire,
        "sub": str(merchant_id),
        "sid": session_id,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def decode_session_token(token: str) -> Optional[dict]:
    """
    Verify signature and expiry. None for anything that does not check out.
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except jwt.PyJWTError:
        return None

def new_session_id() -> str:
    return uuid.uuid4().hex

def verify_password(plain_password: str, hashed_password: str) -> bool:
    # bcrypt only looks at the first 72 bytes; cut before passlib complains
    try:
        return pwd_context.verify(plain_password[:72], hashed_password)
    except ValueError:
        return False

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password[:72])

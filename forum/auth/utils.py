import re
from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from .models import User
from ..config import settings



pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# every rule a password has to pass, with the text the client sees
PASSWORD_RULES = (
    (re.compile(r".{8,}"), "at least 8 characters"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"\d"), "a number"),
    (re.compile(r"[^A-Za-z0-9]"), "a symbol"),
)



def password_problems(password: str) -> List[str]:
    return [label for pattern, label in PASSWORD_RULES if not pattern.search(password)]



def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)



def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """the user behind a username/password pair, or None"""
    user = db.query(User).filter(User.username == username.lower()).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user



def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """signed token whose subject is the user's id"""
    issued = datetime.utcnow()
    expire = issued + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    claims = {"sub": user_id, "iat": issued, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)



def user_id_from_token(token: str) -> Optional[str]:
    """subject of a valid token; None for bad signatures, expiry or a missing sub"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")

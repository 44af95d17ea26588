from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from .models import User
from .utils import user_id_from_token
from ..database import get_db

# a missing header is reported by get_current_user, not by the scheme
security = HTTPBearer(auto_error=False)

AUTH_REQUIRED = "User authentication required"



def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session
) -> Optional[User]:
    if credentials is None:
        return None
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()




async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """The authenticated actor; every other guard runs after this one"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = _user_from_credentials(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user




async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Authenticated user if a valid token came along, None otherwise"""
    return _user_from_credentials(credentials, db)

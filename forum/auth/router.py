import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from .models import User
from .schemas import UserCreate, UserLogin, UserUpdate, Token, UserResponse
from .utils import hash_password, authenticate_user, create_access_token
from .dependencies import get_current_user, get_optional_user
from ..context import parse_body
from ..database import get_db
from ..errors import INVALID_FORM_DATA, field_error, invalid_input
from ..storage import BlobStore, get_blob_store, read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])




@router.post("", status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request,
    existing_session: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Register a new user account"""

    if existing_session is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Authenticated session already exists - log out to create new user"
        )

    user_data = await parse_body(request, UserCreate)

    errors = {}
    if db.query(User).filter(User.email == user_data.email).first():
        errors["email"] = field_error("Email already in use", user_data.email)
    if db.query(User).filter(User.username == user_data.username).first():
        errors["username"] = field_error("Username already taken", user_data.username)
    if errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=invalid_input(errors))

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        name=user_data.name,
        hashed_password=hash_password(user_data.password)
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info("New account %s (%s)", new_user.username, new_user.id)

    return {
        "message": "Account created successfully",
        "user_id": new_user.id,
        "username": new_user.username,
        "access_token": create_access_token(new_user.id),
        "token_type": "bearer"
    }




@router.post("/login", response_model=Token)
async def login(
    request: Request,
    existing_session: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Login with username and password"""

    if existing_session is not None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User already authenticated"
        )

    credentials = await parse_body(request, UserLogin, INVALID_FORM_DATA)

    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    return Token(
        message=f"Logged in as {user.username}",
        access_token=create_access_token(user.id),
        token_type="bearer",
        user=UserResponse.from_user(user)
    )




@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy"""
    return {"message": "User logged out"}




@router.get("/current")
async def get_my_profile(current_user: User = Depends(get_current_user)):
    return {
        "message": f"Profile for {current_user.username}",
        "user": UserResponse.from_user(current_user)
    }




@router.patch("/current")
async def update_my_profile(
    name: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db)
):
    """Update name, bio and avatar image"""

    try:
        update = UserUpdate(name=name, bio=bio)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    image = await read_image_upload(avatar, "avatar")

    old_avatar = new_avatar = None
    if update.name is not None:
        current_user.name = update.name
    if update.bio is not None:
        current_user.bio = update.bio
    if image is not None:
        old_avatar = current_user.avatar
        new_avatar = store.save(image, avatar.filename, avatar.content_type)
        current_user.avatar = new_avatar

    try:
        db.commit()
    except Exception:
        db.rollback()
        # nothing points at the new blob any more
        if new_avatar:
            store.delete(new_avatar)
        raise

    if old_avatar:
        store.delete(old_avatar)

    return {"message": "User info updated"}

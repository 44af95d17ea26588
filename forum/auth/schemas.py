from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Optional
from datetime import datetime

from .utils import password_problems



def _required_text(value: str, label: str, max_length: int) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} required")
    if len(value) > max_length:
        raise ValueError(f"{label} cannot be more than {max_length} characters")
    return value



class UserCreate(BaseModel):
    username: str
    email: EmailStr
    name: str
    password: str


    @validator('username')
    def username_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Username required')
        if len(v) < 3 or len(v) > 20:
            raise ValueError('Username must be between 3 and 20 characters')
        if not v.replace('_', '').isalnum():
            raise ValueError('Username can only contain letters, numbers, and underscores')
        return v.lower()


    @validator('name')
    def name_must_be_valid(cls, v):
        return _required_text(v, 'Name', 255)


    @validator('password')
    def password_must_be_strong(cls, v):
        problems = password_problems(v)
        if problems:
            raise ValueError('Password must contain ' + ', '.join(problems))
        return v




class UserLogin(BaseModel):
    # absent fields are reported as required, not as missing keys
    username: str = Field("", validate_default=True)
    password: str = Field("", validate_default=True)


    @validator('username')
    def username_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Username required')
        return v


    @validator('password')
    def password_required(cls, v):
        if not v:
            raise ValueError('Password required')
        return v




class UserUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None


    @validator('name')
    def name_must_be_valid(cls, v):
        if v is None:
            return v
        return _required_text(v, 'Name', 255)


    @validator('bio')
    def bio_must_fit(cls, v):
        if v is not None and len(v) > 1000:
            raise ValueError('Bio cannot be more than 1000 characters')
        return v




class PublicUser(BaseModel):
    id: str
    username: str
    name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    followers: List[str]
    following: List[str]
    created: datetime


    @classmethod
    def from_user(cls, user) -> "PublicUser":
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            bio=user.bio,
            avatar=user.avatar,
            followers=user.follower_ids,
            following=user.following_ids,
            created=user.created_at,
        )




class UserResponse(PublicUser):
    email: str
    last_login: Optional[datetime] = None


    @classmethod
    def from_user(cls, user) -> "UserResponse":
        public = PublicUser.from_user(user)
        return cls(**public.dict(), email=user.email, last_login=user.last_login)




class Token(BaseModel):
    message: str
    access_token: str
    token_type: str
    user: UserResponse

from pydantic import BaseModel, validator
from typing import List, Optional
from datetime import datetime

MAX_TITLE_LENGTH = 255
MAX_TEXT_LENGTH = 50000

class PostCreate(BaseModel):
    title: str
    text: str

    @validator('title')
    def title_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Title required')
        if len(v) > MAX_TITLE_LENGTH:
            raise ValueError('Title cannot be more than 255 characters')
        return v

    @validator('text')
    def text_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Text required')
        if len(v) > MAX_TEXT_LENGTH:
            raise ValueError('Post cannot be more than 50,000 characters')
        return v

class PostResponse(BaseModel):
    id: str
    title: str
    text: str
    image: Optional[str]
    timestamp: datetime
    author: str
    author_id: str
    group: str
    likes: List[str]

    @classmethod
    def from_post(cls, post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            text=post.text,
            image=post.image,
            timestamp=post.timestamp,
            author=post.author.username,
            author_id=post.author_id,
            group=post.group_id,
            likes=[user.id for user in post.likes],
        )

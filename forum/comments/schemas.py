from pydantic import BaseModel, validator
from datetime import datetime

class CommentCreate(BaseModel):
    text: str

    @validator('text')
    def text_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Text required')
        if len(v) > 20000:
            raise ValueError('Comment cannot be more than 20,000 characters')
        return v

class CommentResponse(BaseModel):
    id: str
    text: str
    timestamp: datetime
    author: str
    author_id: str
    post: str

from pydantic import BaseModel, validator
from typing import List
from datetime import datetime

class GroupCreate(BaseModel):
    name: str
    description: str

    @validator('name')
    def name_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Group name required')
        if len(v) > 255:
            raise ValueError('Group name cannot be more than 255 characters')
        return v

    @validator('description')
    def description_must_be_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Description required')
        if len(v) > 255:
            raise ValueError('Description cannot be more than 255 characters')
        return v

class GroupResponse(BaseModel):
    id: str
    name: str
    description: str
    admin: str
    mods: List[str]
    members: List[str]
    banned: List[str]
    created_at: datetime

    @classmethod
    def from_group(cls, group) -> "GroupResponse":
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            admin=group.admin_id,
            mods=[user.id for user in group.mods],
            members=[user.id for user in group.members],
            banned=[user.id for user in group.banned],
            created_at=group.created_at,
        )

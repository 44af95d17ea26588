"""
Per-request context.

Route dependencies build a ``RequestContext`` step by step: the actor first,
then the group, post, comment or target user named in the path. Each step
checks the id's shape (400) before looking it up (404), and every step
depends on the actor so authentication is always checked first.
"""

import json
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .auth.dependencies import get_current_user
from .auth.models import User
from .comments.models import Comment
from .database import get_db, is_valid_id
from .errors import INVALID_INPUT, field_error, format_validation_errors, invalid_input
from .groups.models import Group
from .posts.models import Post



@dataclass(frozen=True)
class RequestContext:
    actor: User
    group: Optional[Group] = None
    post: Optional[Post] = None
    comment: Optional[Comment] = None
    target_user: Optional[User] = None



def load_or_404(db: Session, model, raw_id: str, kind: str):
    if not is_valid_id(raw_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {kind} id"
        )

    # always a fresh read; guards must see what is stored right now
    found = db.query(model).filter(model.id == raw_id).first()
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {kind} found with id {raw_id}"
        )
    return found



async def get_user_context(
    user_id: str,
    actor: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> RequestContext:
    """actor plus the user named by the path's user_id"""
    target = load_or_404(db, User, user_id, "user")
    return RequestContext(actor=actor, target_user=target)



async def parse_body(request: Request, schema, message: str = INVALID_INPUT):
    """
    Validate the JSON body against ``schema``.

    Routes call this from the handler, after their dependencies ran, so a
    broken body never outranks the auth, id, lookup and role checks.
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw.strip() else {}
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=invalid_input({"body": field_error("JSON decode error")}, message)
        )

    try:
        return schema.parse_obj(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=invalid_input(format_validation_errors(e.errors()), message)
        )

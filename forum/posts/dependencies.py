from dataclasses import replace

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from .models import Post
from ..context import RequestContext, load_or_404
from ..database import get_db
from ..groups.dependencies import get_group_context



async def get_post_context(
    post_id: str,
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
) -> RequestContext:
    """group context plus a post that lives in that group"""
    post = load_or_404(db, Post, post_id, "post")

    # a post reached through the wrong group does not exist there
    if post.group_id != ctx.group.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No post found with id {post_id}"
        )
    return replace(ctx, post=post)

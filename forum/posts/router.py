import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional

from .dependencies import get_post_context
from .models import Post
from .schemas import PostCreate, PostResponse
from .. import social
from ..context import RequestContext
from ..database import get_db
from ..groups import moderation
from ..groups.dependencies import get_group_context, get_member_context
from ..groups.permissions import require, can_delete_post, can_like, can_unlike
from ..storage import BlobStore, get_blob_store, read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups/{group_id}/posts", tags=["posts"])

SORT_ORDERS = {
    "newest": Post.timestamp.desc(),
    "oldest": Post.timestamp.asc(),
}




@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    ctx: RequestContext = Depends(get_member_context),
    title: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db)
):
    """members post to the group, optionally with one image"""

    try:
        post_data = PostCreate(title=title or "", text=text or "")
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    image_data = await read_image_upload(image, "image")

    new_post = Post(
        title=post_data.title,
        text=post_data.text,
        author_id=ctx.actor.id,
        group_id=ctx.group.id
    )
    image_url = None
    if image_data is not None:
        image_url = store.save(image_data, image.filename, image.content_type)
        new_post.image = image_url

    db.add(new_post)
    try:
        db.commit()
    except Exception:
        db.rollback()
        if image_url:
            store.delete(image_url)
        raise
    db.refresh(new_post)

    logger.info("%s posted %s in %s", ctx.actor.username, new_post.id, ctx.group.name)

    return {
        "message": f"New post added to {ctx.group.name} group",
        "id": new_post.id,
        "uri": f"/groups/{ctx.group.id}/posts/{new_post.id}"
    }




@router.get("")
async def get_group_posts(
    sort: str = Query("newest", pattern="^(newest|oldest)$"),
    skip: int = Query(0, ge=0, description="Posts to skip"),
    limit: int = Query(20, ge=1, le=100, description="Posts per page"),
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
):
    posts = (
        db.query(Post)
        .filter(Post.group_id == ctx.group.id)
        .order_by(SORT_ORDERS[sort], Post.id)
        .offset(skip)
        .limit(limit)
        .all()
    )

    return {
        "message": f"{len(posts)} post{'' if len(posts) == 1 else 's'} returned",
        "posts": [PostResponse.from_post(post) for post in posts]
    }




@router.get("/count")
async def get_post_count(
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
):
    count = db.query(Post).filter(Post.group_id == ctx.group.id).count()
    return {
        "message": f"{count} post{'' if count == 1 else 's'} found",
        "count": count
    }




@router.get("/{post_id}")
async def get_post(ctx: RequestContext = Depends(get_post_context)):
    return {
        "message": f"Post {ctx.post.id}",
        "post": PostResponse.from_post(ctx.post)
    }




@router.patch("/{post_id}/like")
async def like_post(
    ctx: RequestContext = Depends(get_post_context),
    db: Session = Depends(get_db)
):
    require(can_like(ctx.group, ctx.actor, ctx.post))
    likes = social.like(db, ctx.post, ctx.actor)
    return {"message": "Post liked", "likes": likes}




@router.patch("/{post_id}/unlike")
async def unlike_post(
    ctx: RequestContext = Depends(get_post_context),
    db: Session = Depends(get_db)
):
    require(can_unlike(ctx.group, ctx.actor, ctx.post))
    likes = social.unlike(db, ctx.post, ctx.actor)
    return {"message": "Post unliked", "likes": likes}




@router.delete("/{post_id}")
async def delete_post(
    ctx: RequestContext = Depends(get_post_context),
    store: BlobStore = Depends(get_blob_store),
    db: Session = Depends(get_db)
):
    """admin or mod; mods cannot remove posts by the admin or other mods"""
    require(can_delete_post(ctx.group, ctx.actor, ctx.post))
    message = moderation.delete_post(db, store, ctx.group, ctx.actor, ctx.post)
    return {"message": message}

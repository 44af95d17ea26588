from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .models import Comment
from .schemas import CommentCreate, CommentResponse
from ..context import RequestContext, load_or_404, parse_body
from ..database import get_db
from ..groups import moderation
from ..groups.permissions import require, can_participate, can_delete_comment
from ..posts.dependencies import get_post_context



router = APIRouter(prefix="/groups/{group_id}/posts/{post_id}/comments", tags=["comments"])



async def get_comment_context(
    comment_id: str,
    ctx: RequestContext = Depends(get_post_context),
    db: Session = Depends(get_db)
) -> RequestContext:
    comment = load_or_404(db, Comment, comment_id, "comment")
    if comment.post_id != ctx.post.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No comment found with id {comment_id}"
        )
    return replace(ctx, comment=comment)


async def get_commenter_context(
    ctx: RequestContext = Depends(get_post_context)
) -> RequestContext:
    require(can_participate(ctx.group, ctx.actor))
    return ctx



def _comment_response(comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        text=comment.text,
        timestamp=comment.timestamp,
        author=comment.author.username,
        author_id=comment.author_id,
        post=comment.post_id
    )




@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    request: Request,
    ctx: RequestContext = Depends(get_commenter_context),
    db: Session = Depends(get_db)
):
    """group members comment on posts"""
    comment_data = await parse_body(request, CommentCreate)
    new_comment = Comment(
        text=comment_data.text,
        author_id=ctx.actor.id,
        post_id=ctx.post.id
    )
    db.add(new_comment)
    db.commit()
    db.refresh(new_comment)

    return {
        "message": "Comment created successfully",
        "id": new_comment.id,
        "uri": f"/groups/{ctx.group.id}/posts/{ctx.post.id}/comments/{new_comment.id}"
    }




@router.get("")
async def get_post_comments(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    ctx: RequestContext = Depends(get_post_context),
    db: Session = Depends(get_db)
):
    """oldest first, the way a thread reads"""
    comments = (
        db.query(Comment)
        .filter(Comment.post_id == ctx.post.id)
        .order_by(Comment.timestamp.asc(), Comment.id)
        .offset(skip)
        .limit(limit)
        .all()
    )
    return {
        "message": f"{len(comments)} comment{'' if len(comments) == 1 else 's'} returned",
        "comments": [_comment_response(comment) for comment in comments]
    }




@router.get("/count")
async def get_comment_count(
    ctx: RequestContext = Depends(get_post_context),
    db: Session = Depends(get_db)
):
    count = db.query(Comment).filter(Comment.post_id == ctx.post.id).count()
    return {
        "message": f"Post has {count} comment{'' if count == 1 else 's'}",
        "count": count
    }




@router.delete("/{comment_id}")
async def delete_comment(
    ctx: RequestContext = Depends(get_comment_context),
    db: Session = Depends(get_db)
):
    """admin or mod; mods cannot remove comments by the admin or other mods"""
    require(can_delete_comment(ctx.group, ctx.actor, ctx.comment))
    message = moderation.delete_comment(db, ctx.group, ctx.actor, ctx.comment)
    return {"message": message}

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import social
from ..auth.schemas import PublicUser
from ..context import RequestContext, get_user_context
from ..database import get_db
from ..groups.permissions import require, can_follow, can_unfollow



router = APIRouter(prefix="/users", tags=["users"])




@router.get("/{user_id}")
async def get_user_profile(ctx: RequestContext = Depends(get_user_context)):
    """public profile; no email or password hash"""
    return {
        "message": f"Profile for {ctx.target_user.username}",
        "user": PublicUser.from_user(ctx.target_user)
    }




@router.patch("/{user_id}/follow")
async def follow_user(
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db)
):
    require(can_follow(ctx.actor, ctx.target_user))
    return {"message": social.follow(db, ctx.actor, ctx.target_user)}




@router.patch("/{user_id}/unfollow")
async def unfollow_user(
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db)
):
    require(can_unfollow(ctx.actor, ctx.target_user))
    return {"message": social.unfollow(db, ctx.actor, ctx.target_user)}

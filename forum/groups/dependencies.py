from dataclasses import replace

from fastapi import Depends
from sqlalchemy.orm import Session

from .models import Group
from .permissions import can_participate, require
from ..auth.dependencies import get_current_user
from ..auth.models import User
from ..context import RequestContext, load_or_404
from ..database import get_db



async def get_group_context(
    group_id: str,
    actor: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> RequestContext:
    group = load_or_404(db, Group, group_id, "group")
    return RequestContext(actor=actor, group=group)




async def get_member_context(
    ctx: RequestContext = Depends(get_group_context)
) -> RequestContext:
    """group context for an actor who belongs to the group"""
    require(can_participate(ctx.group, ctx.actor))
    return ctx




async def get_target_context(
    user_id: str,
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
) -> RequestContext:
    """group context plus the user a moderation action is aimed at"""
    target = load_or_404(db, User, user_id, "user")
    return replace(ctx, target_user=target)

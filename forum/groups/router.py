from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from . import moderation
from .dependencies import get_group_context, get_target_context
from .models import Group, group_members
from .permissions import (
    require, can_join, can_leave, can_promote, can_demote, can_ban, can_unban,
)
from .schemas import GroupCreate, GroupResponse
from ..auth.dependencies import get_current_user
from ..auth.models import User
from ..context import RequestContext, parse_body
from ..database import get_db
from ..errors import field_error, invalid_input



router = APIRouter(prefix="/groups", tags=["groups"])



def _group_list(groups, label: str) -> dict:
    count = len(groups)
    return {
        "message": f"{count} {label}{'' if count == 1 else 's'} found",
        "groups": [GroupResponse.from_group(group) for group in groups]
    }


def _group_update(ctx: RequestContext, message: str) -> dict:
    return {"message": message, "group": GroupResponse.from_group(ctx.group)}




@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """create a group; the creator is its admin"""
    group_data = await parse_body(request, GroupCreate)

    existing_group = db.query(Group).filter(Group.name == group_data.name).first()
    if existing_group:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=invalid_input({"name": field_error("Group name already in use", group_data.name)})
        )

    group = moderation.create_group(db, group_data.name, group_data.description, current_user)

    return {
        "message": f"Created {group.name} group",
        "group": GroupResponse.from_group(group)
    }




@router.get("")
async def list_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    groups = db.query(Group).order_by(Group.name).all()
    return _group_list(groups, "group")




@router.get("/owned")
async def list_owned_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """groups the current user is admin of"""
    groups = db.query(Group).filter(Group.admin_id == current_user.id).order_by(Group.name).all()
    return _group_list(groups, "owned group")




@router.get("/member")
async def list_member_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """groups the current user belongs to"""
    groups = (
        db.query(Group)
        .join(group_members, group_members.c.group_id == Group.id)
        .filter(group_members.c.user_id == current_user.id)
        .order_by(Group.name)
        .all()
    )
    return _group_list(groups, "group membership")




@router.get("/{group_id}")
async def get_group(ctx: RequestContext = Depends(get_group_context)):
    return {
        "message": f"{ctx.group.name} group",
        "group": GroupResponse.from_group(ctx.group)
    }




@router.patch("/{group_id}/members")
async def join_group(
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
):
    require(can_join(ctx.group, ctx.actor))
    message = moderation.join(db, ctx.group, ctx.actor)
    return _group_update(ctx, message)




@router.patch("/{group_id}/leave")
async def leave_group(
    ctx: RequestContext = Depends(get_group_context),
    db: Session = Depends(get_db)
):
    require(can_leave(ctx.group, ctx.actor))
    message = moderation.leave(db, ctx.group, ctx.actor)
    return _group_update(ctx, message)




@router.patch("/{group_id}/mods/demote/{user_id}")
async def demote_mod(
    ctx: RequestContext = Depends(get_target_context),
    db: Session = Depends(get_db)
):
    """admin only: mod back to plain member"""
    require(can_demote(ctx.group, ctx.actor, ctx.target_user))
    message = moderation.demote(db, ctx.group, ctx.actor, ctx.target_user)
    return _group_update(ctx, message)




@router.patch("/{group_id}/mods/{user_id}")
async def promote_member(
    ctx: RequestContext = Depends(get_target_context),
    db: Session = Depends(get_db)
):
    """admin only: member to mod"""
    require(can_promote(ctx.group, ctx.actor, ctx.target_user))
    message = moderation.promote(db, ctx.group, ctx.actor, ctx.target_user)
    return _group_update(ctx, message)




@router.patch("/{group_id}/ban/{user_id}")
async def ban_user(
    ctx: RequestContext = Depends(get_target_context),
    db: Session = Depends(get_db)
):
    require(can_ban(ctx.group, ctx.actor, ctx.target_user))
    message = moderation.ban(db, ctx.group, ctx.actor, ctx.target_user)
    return _group_update(ctx, message)




@router.patch("/{group_id}/unban/{user_id}")
async def unban_user(
    ctx: RequestContext = Depends(get_target_context),
    db: Session = Depends(get_db)
):
    require(can_unban(ctx.group, ctx.actor, ctx.target_user))
    message = moderation.unban(db, ctx.group, ctx.actor, ctx.target_user)
    return _group_update(ctx, message)

"""
Permission resolver.

Each ``can_*`` function answers one action from the actor's point of view and
returns a ``Permission``. Guards inside a function run in a fixed order
(role, then self-action, then target state, then idempotence) so a request
that trips several of them always reports the same one. Nothing here touches
the database; callers hand in already-loaded groups, users and posts.
"""

from typing import NamedTuple, Optional

from fastapi import HTTPException, status

from .roles import Role, MEMBERS, MODERATORS, role_of



class Permission(NamedTuple):
    allowed: bool
    status_code: int = status.HTTP_200_OK
    reason: Optional[str] = None


ALLOW = Permission(True)


def deny(reason: str, status_code: int = status.HTTP_403_FORBIDDEN) -> Permission:
    return Permission(False, status_code, reason)


def require(permission: Permission) -> None:
    """raise the denial as an HTTP error; no-op when allowed"""
    if not permission.allowed:
        raise HTTPException(status_code=permission.status_code, detail=permission.reason)



ADMIN_ONLY = "Only group admin can make this request"
ADMIN_OR_MOD_ONLY = "Only group admin or mod can make this request"



def _not_member(user, group) -> Permission:
    return deny(f"{user.username} is not a member of {group.name} group")


def can_participate(group, actor) -> Permission:
    """post, comment, like: members only"""
    if role_of(group, actor.id) not in MEMBERS:
        return _not_member(actor, group)
    return ALLOW



def can_join(group, actor) -> Permission:
    role = role_of(group, actor.id)
    if role == Role.BANNED:
        return deny(f"{actor.username} is banned from {group.name} group")
    if role in MEMBERS:
        return deny(
            f"{actor.username} is already a member of {group.name} group",
            status.HTTP_409_CONFLICT
        )
    return ALLOW



def can_leave(group, actor) -> Permission:
    role = role_of(group, actor.id)
    if role not in MEMBERS:
        return _not_member(actor, group)
    if role == Role.ADMIN:
        return deny("Group admin cannot leave the group")
    return ALLOW



def can_promote(group, actor, target) -> Permission:
    if role_of(group, actor.id) != Role.ADMIN:
        return deny(ADMIN_ONLY)
    target_role = role_of(group, target.id)
    if target_role not in MEMBERS:
        return _not_member(target, group)
    if target_role in MODERATORS:
        return deny(
            f"{target.username} is already a mod of {group.name} group",
            status.HTTP_409_CONFLICT
        )
    return ALLOW



def can_demote(group, actor, target) -> Permission:
    if role_of(group, actor.id) != Role.ADMIN:
        return deny(ADMIN_ONLY)
    target_role = role_of(group, target.id)
    if target_role == Role.ADMIN:
        return deny("Group admin cannot be demoted")
    if target_role != Role.MOD:
        return deny(f"{target.username} is not a mod of {group.name} group")
    return ALLOW



def can_ban(group, actor, target) -> Permission:
    actor_role = role_of(group, actor.id)
    if actor_role not in MODERATORS:
        return deny(ADMIN_OR_MOD_ONLY)
    if actor.id == target.id:
        return deny("User cannot ban themselves")

    target_role = role_of(group, target.id)
    if target_role == Role.ADMIN:
        return deny("Group admin cannot be banned")
    if target_role == Role.MOD and actor_role != Role.ADMIN:
        return deny("Only admin can ban mods")
    if target_role == Role.BANNED:
        return deny(
            f"{target.username} is already banned from {group.name} group",
            status.HTTP_409_CONFLICT
        )
    if target_role == Role.OUTSIDER:
        return _not_member(target, group)
    return ALLOW



def can_unban(group, actor, target) -> Permission:
    if role_of(group, actor.id) not in MODERATORS:
        return deny(ADMIN_OR_MOD_ONLY)
    if role_of(group, target.id) != Role.BANNED:
        return deny(f"{target.username} is not banned from {group.name} group")
    return ALLOW



def _can_remove(group, actor, author_id: str, kind: str) -> Permission:
    actor_role = role_of(group, actor.id)
    if actor_role not in MODERATORS:
        return deny(ADMIN_OR_MOD_ONLY)
    if actor_role == Role.MOD and author_id != actor.id and role_of(group, author_id) in MODERATORS:
        return deny(f"Mod cannot delete {kind} by admin or another mod")
    return ALLOW


def can_delete_post(group, actor, post) -> Permission:
    return _can_remove(group, actor, post.author_id, "posts")


def can_delete_comment(group, actor, comment) -> Permission:
    return _can_remove(group, actor, comment.author_id, "comments")



def can_like(group, actor, post) -> Permission:
    membership = can_participate(group, actor)
    if not membership.allowed:
        return membership
    if actor.id in post.like_ids:
        return deny("Can only like a post once")
    return ALLOW


def can_unlike(group, actor, post) -> Permission:
    membership = can_participate(group, actor)
    if not membership.allowed:
        return membership
    if actor.id not in post.like_ids:
        return deny("Post not liked")
    return ALLOW



def can_follow(actor, target) -> Permission:
    if actor.id == target.id:
        return deny("User cannot follow themselves")
    if target.id in actor.following_ids:
        return deny(f"User already following {target.username}")
    return ALLOW


def can_unfollow(actor, target) -> Permission:
    if actor.id == target.id:
        return deny("User cannot unfollow themselves")
    if target.id not in actor.following_ids:
        return deny(f"User is not following {target.username}")
    return ALLOW

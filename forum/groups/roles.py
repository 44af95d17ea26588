"""
Membership and role model for groups.

A user's role in a group is never stored. It is read off the group's sets
every time it is needed::

    admin    the group's single admin_id (also in mods and members)
    mod      in mod_ids (also in members)
    member   in member_ids only
    banned   in banned_ids (never in members)
    outsider none of the above

Functions here only read ``admin_id``, ``member_ids``, ``mod_ids`` and
``banned_ids``, so anything exposing those attributes works as a group.
"""

from enum import Enum
from typing import List

from ..errors import MembershipInvariantError


class Role(str, Enum):
    ADMIN = "admin"
    MOD = "mod"
    MEMBER = "member"
    BANNED = "banned"
    OUTSIDER = "outsider"


# admin implies mod implies member
MODERATORS = (Role.ADMIN, Role.MOD)
MEMBERS = (Role.ADMIN, Role.MOD, Role.MEMBER)



def is_admin(group, user_id: str) -> bool:
    return group.admin_id == user_id


def is_mod(group, user_id: str) -> bool:
    return is_admin(group, user_id) or user_id in group.mod_ids


def is_member(group, user_id: str) -> bool:
    return is_admin(group, user_id) or user_id in group.member_ids


def is_banned(group, user_id: str) -> bool:
    return user_id in group.banned_ids



def role_of(group, user_id: str) -> Role:
    """Most senior role ``user_id`` holds in ``group``."""
    if is_admin(group, user_id):
        return Role.ADMIN
    if is_banned(group, user_id):
        return Role.BANNED
    if is_mod(group, user_id):
        return Role.MOD
    if is_member(group, user_id):
        return Role.MEMBER
    return Role.OUTSIDER



def check_invariants(group) -> List[str]:
    """Every way the group's sets disagree with each other; empty when consistent."""
    members = group.member_ids
    mods = group.mod_ids
    banned = group.banned_ids
    problems = []

    if group.admin_id not in members:
        problems.append("admin is not a member")
    if group.admin_id not in mods:
        problems.append("admin is not a mod")
    if group.admin_id in banned:
        problems.append("admin is banned")
    for user_id in sorted(mods - members):
        problems.append(f"mod {user_id} is not a member")
    for user_id in sorted(members & banned):
        problems.append(f"member {user_id} is also banned")
    return problems


def assert_invariants(group) -> None:
    problems = check_invariants(group)
    if problems:
        raise MembershipInvariantError(f"group {group.id}: " + "; ".join(problems))

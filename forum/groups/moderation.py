"""
Moderation actions: the writes behind group membership and removal.

Callers check the matching ``can_*`` permission first. Every handler then
changes the group's sets (or deletes a post/comment) and commits once, so a
request either lands completely or not at all. Membership changes are
checked against the group invariants before the commit.
"""

import logging

from sqlalchemy.orm import Session

from .models import Group
from .roles import assert_invariants
from ..storage import BlobStore

logger = logging.getLogger(__name__)



def _commit(db: Session, group: Group) -> None:
    try:
        assert_invariants(group)
        db.commit()
    except Exception:
        db.rollback()
        raise




def create_group(db: Session, name: str, description: str, admin) -> Group:
    """the creator becomes admin, mod and member in the same write"""
    group = Group(name=name, description=description, admin_id=admin.id)
    group.admin = admin
    group.members.append(admin)
    group.mods.append(admin)
    db.add(group)

    _commit(db, group)
    db.refresh(group)

    logger.info("%s created group %s (%s)", admin.username, group.name, group.id)
    return group




def join(db: Session, group: Group, user) -> str:
    group.members.append(user)
    _commit(db, group)

    logger.info("%s joined group %s", user.username, group.name)
    return f"{user.username} joined {group.name} group"




def leave(db: Session, group: Group, user) -> str:
    group.members.remove(user)
    if user in group.mods:
        group.mods.remove(user)
    _commit(db, group)

    logger.info("%s left group %s", user.username, group.name)
    return f"{user.username} left {group.name} group"




def promote(db: Session, group: Group, actor, target) -> str:
    group.mods.append(target)
    _commit(db, group)

    logger.info("%s promoted %s to mod of %s", actor.username, target.username, group.name)
    return f"{target.username} is now a mod of {group.name} group"




def demote(db: Session, group: Group, actor, target) -> str:
    # stays a member
    group.mods.remove(target)
    _commit(db, group)

    logger.info("%s demoted %s in %s", actor.username, target.username, group.name)
    return f"{target.username} is no longer a mod of {group.name} group"




def ban(db: Session, group: Group, actor, target) -> str:
    """strip mod and membership and record the ban in one commit"""
    if target in group.mods:
        group.mods.remove(target)
    group.members.remove(target)
    group.banned.append(target)
    _commit(db, group)

    logger.info("%s banned %s from %s", actor.username, target.username, group.name)
    return f"{target.username} has been banned from {group.name} group"




def unban(db: Session, group: Group, actor, target) -> str:
    # back to outsider; rejoining is up to them
    group.banned.remove(target)
    _commit(db, group)

    logger.info("%s unbanned %s from %s", actor.username, target.username, group.name)
    return f"{target.username} has been unbanned from {group.name} group"




def delete_post(db: Session, store: BlobStore, group: Group, actor, post) -> str:
    """remove a post with its comments and likes, then its image"""
    post_id = post.id
    image = post.image
    comment_count = len(post.comments)

    try:
        db.delete(post)
        db.commit()
    except Exception:
        db.rollback()
        raise

    if image:
        store.delete(image)

    logger.info(
        "%s deleted post %s (%d comments) in %s",
        actor.username, post_id, comment_count, group.name
    )
    return "Post deleted"




def delete_comment(db: Session, group: Group, actor, comment) -> str:
    comment_id = comment.id
    try:
        db.delete(comment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("%s deleted comment %s in %s", actor.username, comment_id, group.name)
    return "Comment deleted"

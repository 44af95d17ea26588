"""
Follow graph and like ledger.

A follow is a single ``user_follows`` row, so ``A.following`` and
``B.followers`` can never disagree. Likes are a set per post. Callers check
``can_follow`` / ``can_like`` and friends first; repeats are refused there,
never silently ignored here.
"""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)



def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise



def follow(db: Session, actor, target) -> str:
    actor.following.append(target)
    _commit(db)

    logger.info("%s followed %s", actor.username, target.username)
    return f"User is now following {target.username}"


def unfollow(db: Session, actor, target) -> str:
    actor.following.remove(target)
    _commit(db)

    logger.info("%s unfollowed %s", actor.username, target.username)
    return f"User is no longer following {target.username}"



def like(db: Session, post, user) -> int:
    """record the like; returns the post's like count"""
    post.likes.append(user)
    _commit(db)
    return len(post.likes)


def unlike(db: Session, post, user) -> int:
    post.likes.remove(user)
    _commit(db)
    return len(post.likes)

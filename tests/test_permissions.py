"""
Tests for the permission resolver.

Groups, users and posts are plain namespaces here; the resolver only reads
attributes, so no database is involved.
"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from forum.groups.permissions import (
    ALLOW,
    can_ban,
    can_delete_comment,
    can_delete_post,
    can_demote,
    can_follow,
    can_join,
    can_leave,
    can_like,
    can_participate,
    can_promote,
    can_unban,
    can_unfollow,
    can_unlike,
    deny,
    require,
)


# ============================================================================
# Fixtures
# ============================================================================

def person(name, following=()):
    return SimpleNamespace(id=name, username=name, following_ids=list(following))


@pytest.fixture
def users():
    return SimpleNamespace(
        alice=person("alice"),   # admin
        bob=person("bob"),       # mod
        mia=person("mia"),       # mod
        carol=person("carol"),   # member
        dave=person("dave"),     # banned
        erin=person("erin"),     # outsider
    )


@pytest.fixture
def group():
    mods = {"alice", "bob", "mia"}
    return SimpleNamespace(
        id="g1",
        name="general",
        admin_id="alice",
        mod_ids=mods,
        member_ids=mods | {"carol"},
        banned_ids={"dave"},
    )


def authored_by(author_id, likes=()):
    return SimpleNamespace(author_id=author_id, like_ids=set(likes))


def assert_denied(permission, status_code, reason):
    assert not permission.allowed
    assert permission.status_code == status_code
    assert permission.reason == reason


# ============================================================================
# require / deny
# ============================================================================

def test_require_passes_allowed_permission():
    require(ALLOW)


def test_require_raises_denial_as_http_error():
    with pytest.raises(HTTPException) as exc_info:
        require(deny("nope", 409))
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "nope"


def test_deny_defaults_to_forbidden():
    assert deny("nope").status_code == 403


# ============================================================================
# Membership
# ============================================================================

def test_members_can_participate(group, users):
    for user in (users.alice, users.bob, users.carol):
        assert can_participate(group, user).allowed


@pytest.mark.parametrize("name", ["dave", "erin"])
def test_non_members_cannot_participate(group, users, name):
    assert_denied(
        can_participate(group, getattr(users, name)),
        403, f"{name} is not a member of general group"
    )


def test_outsider_can_join(group, users):
    assert can_join(group, users.erin).allowed


def test_banned_user_cannot_join(group, users):
    assert_denied(can_join(group, users.dave), 403, "dave is banned from general group")


def test_member_cannot_join_twice(group, users):
    assert_denied(can_join(group, users.carol), 409, "carol is already a member of general group")


def test_member_and_mod_can_leave(group, users):
    assert can_leave(group, users.carol).allowed
    assert can_leave(group, users.bob).allowed


def test_admin_cannot_leave(group, users):
    assert_denied(can_leave(group, users.alice), 403, "Group admin cannot leave the group")


def test_outsider_cannot_leave(group, users):
    assert_denied(can_leave(group, users.erin), 403, "erin is not a member of general group")


# ============================================================================
# Promote / demote
# ============================================================================

def test_admin_promotes_member(group, users):
    assert can_promote(group, users.alice, users.carol).allowed


def test_mod_cannot_promote(group, users):
    assert_denied(
        can_promote(group, users.bob, users.carol),
        403, "Only group admin can make this request"
    )


@pytest.mark.parametrize("name", ["dave", "erin"])
def test_promote_requires_membership(group, users, name):
    assert_denied(
        can_promote(group, users.alice, getattr(users, name)),
        403, f"{name} is not a member of general group"
    )


def test_promote_existing_mod_conflicts(group, users):
    assert_denied(
        can_promote(group, users.alice, users.bob),
        409, "bob is already a mod of general group"
    )


def test_admin_demotes_mod(group, users):
    assert can_demote(group, users.alice, users.bob).allowed


def test_mod_cannot_demote(group, users):
    assert_denied(
        can_demote(group, users.mia, users.bob),
        403, "Only group admin can make this request"
    )


def test_admin_cannot_demote_self(group, users):
    assert_denied(can_demote(group, users.alice, users.alice), 403, "Group admin cannot be demoted")


def test_demote_requires_mod(group, users):
    assert_denied(
        can_demote(group, users.alice, users.carol),
        403, "carol is not a mod of general group"
    )


# ============================================================================
# Ban / unban
# ============================================================================

def test_admin_bans_member_and_mod(group, users):
    assert can_ban(group, users.alice, users.carol).allowed
    assert can_ban(group, users.alice, users.bob).allowed


def test_mod_bans_member(group, users):
    assert can_ban(group, users.bob, users.carol).allowed


def test_member_cannot_ban(group, users):
    assert_denied(
        can_ban(group, users.carol, users.bob),
        403, "Only group admin or mod can make this request"
    )


def test_cannot_ban_self(group, users):
    assert_denied(can_ban(group, users.bob, users.bob), 403, "User cannot ban themselves")
    assert_denied(can_ban(group, users.alice, users.alice), 403, "User cannot ban themselves")


def test_nobody_bans_admin(group, users):
    assert_denied(can_ban(group, users.bob, users.alice), 403, "Group admin cannot be banned")


def test_mod_cannot_ban_mod(group, users):
    assert_denied(can_ban(group, users.bob, users.mia), 403, "Only admin can ban mods")


def test_ban_already_banned_conflicts(group, users):
    assert_denied(
        can_ban(group, users.alice, users.dave),
        409, "dave is already banned from general group"
    )


def test_ban_requires_membership(group, users):
    assert_denied(
        can_ban(group, users.alice, users.erin),
        403, "erin is not a member of general group"
    )


def test_role_check_precedes_self_check(group, users):
    # a member banning themselves trips the role guard first
    assert_denied(
        can_ban(group, users.carol, users.carol),
        403, "Only group admin or mod can make this request"
    )


def test_mod_unbans(group, users):
    assert can_unban(group, users.bob, users.dave).allowed


def test_member_cannot_unban(group, users):
    assert_denied(
        can_unban(group, users.carol, users.dave),
        403, "Only group admin or mod can make this request"
    )


def test_unban_requires_ban(group, users):
    assert_denied(
        can_unban(group, users.alice, users.carol),
        403, "carol is not banned from general group"
    )


# ============================================================================
# Removing posts and comments
# ============================================================================

@pytest.mark.parametrize("author", ["alice", "bob", "carol", "dave", "erin"])
def test_admin_deletes_any_post(group, users, author):
    assert can_delete_post(group, users.alice, authored_by(author)).allowed


@pytest.mark.parametrize("author", ["bob", "carol", "dave", "erin"])
def test_mod_deletes_own_and_non_mod_posts(group, users, author):
    assert can_delete_post(group, users.bob, authored_by(author)).allowed


@pytest.mark.parametrize("author", ["alice", "mia"])
def test_mod_cannot_delete_admin_or_mod_posts(group, users, author):
    assert_denied(
        can_delete_post(group, users.bob, authored_by(author)),
        403, "Mod cannot delete posts by admin or another mod"
    )


@pytest.mark.parametrize("author", ["alice", "mia"])
def test_mod_cannot_delete_admin_or_mod_comments(group, users, author):
    assert_denied(
        can_delete_comment(group, users.bob, authored_by(author)),
        403, "Mod cannot delete comments by admin or another mod"
    )


def test_mod_deletes_member_comment(group, users):
    assert can_delete_comment(group, users.bob, authored_by("carol")).allowed


def test_member_cannot_delete_even_own_post(group, users):
    assert_denied(
        can_delete_post(group, users.carol, authored_by("carol")),
        403, "Only group admin or mod can make this request"
    )


# ============================================================================
# Likes and follows
# ============================================================================

def test_member_likes_once(group, users):
    assert can_like(group, users.carol, authored_by("alice")).allowed
    assert_denied(
        can_like(group, users.carol, authored_by("alice", likes=["carol"])),
        403, "Can only like a post once"
    )


def test_unlike_requires_like(group, users):
    assert can_unlike(group, users.carol, authored_by("alice", likes=["carol"])).allowed
    assert_denied(can_unlike(group, users.carol, authored_by("alice")), 403, "Post not liked")


def test_outsider_cannot_like(group, users):
    assert_denied(
        can_like(group, users.erin, authored_by("alice")),
        403, "erin is not a member of general group"
    )


def test_follow_rules():
    alice = person("alice", following=["bob"])
    bob = person("bob")
    carol = person("carol")

    assert can_follow(alice, carol).allowed
    assert_denied(can_follow(alice, alice), 403, "User cannot follow themselves")
    assert_denied(can_follow(alice, bob), 403, "User already following bob")


def test_unfollow_rules():
    alice = person("alice", following=["bob"])
    bob = person("bob")
    carol = person("carol")

    assert can_unfollow(alice, bob).allowed
    assert_denied(can_unfollow(alice, alice), 403, "User cannot unfollow themselves")
    assert_denied(can_unfollow(alice, carol), 403, "User is not following carol")

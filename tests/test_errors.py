"""
Error responses: validation formatting and the catch-all handler.
"""

from forum.config import _env_flag
from forum.errors import format_validation_errors
from forum.groups.roles import Role, role_of
from tests.conftest import auth_headers


def test_format_validation_errors():
    errors = [
        {"loc": ("body", "name"), "msg": "Value error, Group name required", "input": ""},
        {"loc": ("body", "name"), "msg": "second error is dropped", "input": ""},
        {"loc": ("query", "limit"), "msg": "Input should be less than or equal to 100", "input": "500"},
        {"loc": ("body",), "msg": "Field required", "input": None},
    ]

    assert format_validation_errors(errors) == {
        "name": {"msg": "Group name required", "location": "body", "value": ""},
        "limit": {"msg": "Input should be less than or equal to 100", "location": "query", "value": "500"},
        "body": {"msg": "Field required", "location": "body"},
    }


def test_error_position_is_not_a_field_name():
    errors = [{"loc": ("body", 1), "msg": "JSON decode error", "input": {}}]

    assert format_validation_errors(errors) == {
        "body": {"msg": "JSON decode error", "location": "body"},
    }


def test_list_index_reports_the_list_field():
    errors = [{"loc": ("body", "tags", 0), "msg": "Input should be a valid string", "input": 3}]

    assert list(format_validation_errors(errors)) == ["tags"]


def test_debug_is_off_unless_asked_for(monkeypatch):
    monkeypatch.delenv("FORUM_TEST_FLAG", raising=False)
    assert _env_flag("FORUM_TEST_FLAG") is False

    monkeypatch.setenv("FORUM_TEST_FLAG", "True")
    assert _env_flag("FORUM_TEST_FLAG") is True


def test_broken_group_is_refused_and_rolled_back(server, db, general):
    # admin dropped from members behind the API's back
    general.group.members.remove(general.admin)
    db.commit()

    response = server.patch(
        f"/groups/{general.group.id}/members", headers=auth_headers(general.outsider)
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    db.expire_all()
    assert role_of(general.group, general.outsider.id) == Role.OUTSIDER


def test_health(client):
    assert client.get("/health").json()["message"] == "healthy"

# tests/v1/test_comments.py
"""Tests for comment and pin endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import status

from askboard.models import Comment
from tests.factories import make_comment


def test_create_comment(client, member_headers, member, question) -> None:
    response = client.post(
        "/api/v1/comments",
        json={"subjectId": question.id, "content": "Great question"},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    comment = response.json()["comment"]
    assert comment["content"] == "Great question"
    assert comment["userId"] == member.id
    assert comment["isAdminComment"] is False
    assert comment["isPinned"] is False


def test_admin_comment_is_badged(client, admin_headers, question) -> None:
    response = client.post(
        "/api/v1/comments",
        json={"subjectId": question.id, "content": "Official answer"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["comment"]["isAdminComment"] is True


def test_comment_requires_authentication(client, question) -> None:
    response = client.post(
        "/api/v1/comments", json={"subjectId": question.id, "content": "hi"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_empty_comment_is_rejected(client, member_headers, question) -> None:
    response = client.post(
        "/api/v1/comments",
        json={"subjectId": question.id, "content": ""},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_comment_on_missing_question(client, member_headers) -> None:
    response = client.post(
        "/api/v1/comments",
        json={"subjectId": 77_777, "content": "hi"},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_pin_requires_privilege(client, member_headers, db_session, question, member) -> None:
    comment = make_comment(db_session, question, member)

    response = client.post(
        "/api/v1/pin",
        json={"commentId": comment.id, "subjectId": question.id, "desiredPinned": True},
        headers=member_headers,
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.expire_all()
    assert db_session.get(Comment, comment.id).is_pinned is False


def test_admin_pins_and_thread_reorders(client, admin_headers, db_session, question, member) -> None:
    t0 = datetime(2025, 1, 1, tzinfo=UTC)
    first = make_comment(db_session, question, member, created_at=t0)
    second = make_comment(db_session, question, member, created_at=t0 + timedelta(minutes=1))

    response = client.post(
        "/api/v1/pin",
        json={"commentId": second.id, "subjectId": question.id, "desiredPinned": True},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["isPinned"] is True

    thread = client.get(f"/api/v1/questions/{question.id}/comments").json()
    assert [c["id"] for c in thread] == [second.id, first.id]

    unpin = client.post(
        "/api/v1/pin",
        json={"commentId": second.id, "subjectId": question.id, "desiredPinned": False},
        headers=admin_headers,
    )
    assert unpin.json()["isPinned"] is False
    thread = client.get(f"/api/v1/questions/{question.id}/comments").json()
    assert [c["id"] for c in thread] == [first.id, second.id]


def test_pin_wrong_question_is_not_found(client, admin_headers, db_session, question, member) -> None:
    comment = make_comment(db_session, question, member)
    response = client.post(
        "/api/v1/pin",
        json={"commentId": comment.id, "subjectId": question.id + 1000, "desiredPinned": True},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_pin_requires_authentication(client, db_session, question, member) -> None:
    comment = make_comment(db_session, question, member)
    response = client.post(
        "/api/v1/pin",
        json={"commentId": comment.id, "subjectId": question.id, "desiredPinned": True},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

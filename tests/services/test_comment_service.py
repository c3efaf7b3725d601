# tests/services/test_comment_service.py
"""Tests for comment creation, thread retrieval and question asking."""

from datetime import UTC, datetime, timedelta

import pytest

from askboard.services.comments import CommentService
from askboard.services.errors import NotFound, RateLimited, Unauthorized
from askboard.services.questions import QuestionService
from askboard.services.roles import is_privileged
from tests.factories import make_comment


def test_is_privileged_predicate() -> None:
    assert is_privileged("admin")
    assert is_privileged("me")
    assert is_privileged("OG")
    assert not is_privileged("user")
    assert not is_privileged(None)
    assert is_privileged("moderator", privileged_roles=["moderator"])


def test_admin_badge_follows_author_role(db_session, notifier, question, member, admin) -> None:
    service = CommentService(db_session, notifier)

    plain = service.create(question.id, member.id, "plain")
    badged = service.create(question.id, admin.id, "official")

    assert plain.is_admin_comment is False
    assert badged.is_admin_comment is True
    assert plain.is_pinned is False


def test_admin_badge_is_fixed_at_creation(db_session, notifier, question, admin) -> None:
    comment = CommentService(db_session, notifier).create(question.id, admin.id, "hi")
    admin.role = "user"
    db_session.commit()
    db_session.refresh(comment)
    assert comment.is_admin_comment is True


def test_create_publishes_insert(db_session, notifier, question, member, mocker) -> None:
    publish = mocker.spy(notifier, "publish")
    comment = CommentService(db_session, notifier).create(question.id, member.id, "hello")

    event = publish.call_args.args[0]
    assert event.kind == "insert"
    assert event.comment.id == comment.id


def test_create_on_unknown_question(db_session, notifier, member) -> None:
    with pytest.raises(NotFound):
        CommentService(db_session, notifier).create(999_999, member.id, "x")


def test_create_requires_author(db_session, notifier, question) -> None:
    with pytest.raises(Unauthorized):
        CommentService(db_session, notifier).create(question.id, None, "x")


def test_list_ordered(db_session, notifier, question, member) -> None:
    t0 = datetime(2025, 1, 1, tzinfo=UTC)
    old = make_comment(db_session, question, member, created_at=t0)
    new = make_comment(db_session, question, member, created_at=t0 + timedelta(hours=1))
    pinned = make_comment(
        db_session, question, member, created_at=t0 + timedelta(hours=2), is_pinned=True
    )

    ordered = CommentService(db_session, notifier).list_ordered(question.id)

    assert [c.id for c in ordered] == [pinned.id, old.id, new.id]


def test_daily_question_cap(db_session, member) -> None:
    service = QuestionService(db_session, daily_limit=2)
    service.ask(member.id, "one", None)
    service.ask(member.id, "two", None)

    with pytest.raises(RateLimited):
        service.ask(member.id, "three", None)


def test_privileged_roles_skip_question_cap(db_session, admin) -> None:
    service = QuestionService(db_session, daily_limit=1)
    for n in range(3):
        service.ask(admin.id, f"q{n}", None)
    assert len(service.list_for_user(admin.id)) == 3


def test_zero_cap_disables_limit(db_session, member) -> None:
    service = QuestionService(db_session, daily_limit=0)
    for n in range(3):
        service.ask(member.id, f"q{n}", None)


def test_get_unknown_question(db_session) -> None:
    with pytest.raises(NotFound):
        QuestionService(db_session).get(123_456)

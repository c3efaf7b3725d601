# tests/services/test_notifier.py
"""Tests for change notification fan-out and the Redis relay."""

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis

from askboard.core.settings import settings
from askboard.schemas.comment import CommentResponse
from askboard.schemas.events import ChangeEvent
from askboard.services.notifier import ChangeNotifier, RedisEventListener, RedisEventRelay


def _vote_event(question_id: int = 1, count: int = 1) -> ChangeEvent:
    return ChangeEvent(question_id=question_id, table="questions", kind="update", vote_count=count)


def _comment_row(comment_id: int = 1, question_id: int = 1) -> CommentResponse:
    return CommentResponse(
        id=comment_id,
        question_id=question_id,
        user_id="u",
        content="hello",
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        is_admin_comment=False,
        is_pinned=False,
    )


@pytest.mark.asyncio
async def test_publish_reaches_subscribers_of_the_question() -> None:
    notifier = ChangeNotifier()
    mine = notifier.subscribe(1)
    theirs = notifier.subscribe(2)

    notifier.publish(_vote_event(question_id=1, count=3))

    event = await asyncio.wait_for(mine.get(), timeout=1)
    assert event.vote_count == 3
    assert theirs._queue.empty()


@pytest.mark.asyncio
async def test_table_filter_and_predicate() -> None:
    notifier = ChangeNotifier()
    comments_only = notifier.subscribe(1, tables=["comments"])
    pinned_only = notifier.subscribe(
        1, predicate=lambda e: e.comment is not None and e.comment.is_pinned
    )

    notifier.publish(_vote_event())
    notifier.publish_comment("insert", _comment_row())

    event = await asyncio.wait_for(comments_only.get(), timeout=1)
    assert event.table == "comments"
    assert comments_only._queue.empty()
    assert pinned_only._queue.empty()


@pytest.mark.asyncio
async def test_full_queue_drops_oldest() -> None:
    notifier = ChangeNotifier(queue_size=2)
    subscription = notifier.subscribe(1)

    for count in range(1, 5):
        notifier.publish(_vote_event(count=count))

    assert subscription.dropped == 2
    assert (await subscription.get()).vote_count == 3
    assert (await subscription.get()).vote_count == 4


@pytest.mark.asyncio
async def test_publish_from_worker_thread() -> None:
    notifier = ChangeNotifier()
    subscription = notifier.subscribe(1)

    await asyncio.to_thread(notifier.publish, _vote_event(count=7))

    event = await asyncio.wait_for(subscription.get(), timeout=1)
    assert event.vote_count == 7


@pytest.mark.asyncio
async def test_close_ends_iteration_and_unsubscribes() -> None:
    notifier = ChangeNotifier()
    received = []

    async with notifier.subscribe(1) as subscription:
        assert notifier.subscriber_count(1) == 1
        notifier.publish(_vote_event(count=1))
        subscription.close()
        async for event in subscription:
            received.append(event.vote_count)

    assert received == [1]
    assert notifier.subscriber_count(1) == 0


def test_publish_without_subscribers_is_a_no_op() -> None:
    assert ChangeNotifier().dispatch(_vote_event()) == 0


def test_relay_publishes_json_envelope() -> None:
    client = MagicMock(spec=redis.Redis)
    relay = RedisEventRelay(client, channel_prefix="test:q", origin="node-a")

    assert relay.publish(_vote_event(question_id=5, count=2)) is True

    channel, payload = client.publish.call_args.args
    assert channel == "test:q:5"
    envelope = json.loads(payload)
    assert envelope["origin"] == "node-a"
    assert envelope["event"]["questionId"] == 5
    assert envelope["event"]["voteCount"] == 2


def test_relay_failure_is_reported_not_raised() -> None:
    client = MagicMock(spec=redis.Redis)
    client.publish.side_effect = redis.ConnectionError("down")
    relay = RedisEventRelay(client, channel_prefix="test:q")

    assert relay.publish(_vote_event()) is False


def test_notifier_publishes_locally_and_to_relay() -> None:
    client = MagicMock(spec=redis.Redis)
    relay = RedisEventRelay(client, channel_prefix="test:q")
    notifier = ChangeNotifier(relay=relay)

    notifier.publish(_vote_event())

    client.publish.assert_called_once()


@pytest.mark.asyncio
async def test_listener_dispatches_remote_events_only() -> None:
    notifier = ChangeNotifier()
    subscription = notifier.subscribe(1)
    local = RedisEventRelay(MagicMock(spec=redis.Redis), channel_prefix="test:q", origin="local")
    remote = RedisEventRelay(MagicMock(spec=redis.Redis), channel_prefix="test:q", origin="remote")
    listener = RedisEventListener(notifier, local, client=MagicMock())

    own = {"type": "pmessage", "data": local.encode(_vote_event(count=1)).encode()}
    other = {"type": "pmessage", "data": remote.encode(_vote_event(count=2)).encode()}

    assert listener.handle_message(own) is False
    assert listener.handle_message(other) is True
    assert listener.handle_message({"type": "pmessage", "data": b"not json"}) is False
    assert listener.handle_message({"type": "psubscribe", "data": 1}) is False

    event = await asyncio.wait_for(subscription.get(), timeout=1)
    assert event.vote_count == 2
    assert subscription._queue.empty()


def test_relay_client_uses_bounded_socket_timeouts(mocker) -> None:
    """An unreachable Redis must not stall the caller for the OS TCP timeout."""
    from_url = mocker.patch("askboard.services.notifier.redis.from_url")

    RedisEventRelay(channel_prefix="test:q").client

    from_url.assert_called_once_with(
        settings.redis_url,
        socket_connect_timeout=settings.redis_connect_timeout,
        socket_timeout=settings.redis_socket_timeout,
    )


@pytest.mark.asyncio
async def test_listener_survives_unexpected_errors(caplog) -> None:
    pubsub = MagicMock()
    pubsub.psubscribe = AsyncMock(side_effect=RuntimeError("boom"))
    pubsub.aclose = AsyncMock()
    client = MagicMock()
    client.pubsub.return_value = pubsub
    client.aclose = AsyncMock()
    relay = RedisEventRelay(MagicMock(spec=redis.Redis), channel_prefix="test:q")
    listener = RedisEventListener(ChangeNotifier(), relay, client=client)

    with caplog.at_level("ERROR", logger="askboard.services.notifier"):
        await listener.start()
        for _ in range(100):
            if pubsub.psubscribe.await_count:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)

        assert pubsub.psubscribe.await_count >= 1
        assert not listener._task.done()
        assert "failed unexpectedly" in caplog.text

        await asyncio.wait_for(listener.stop(), timeout=2)

    pubsub.aclose.assert_awaited()
    client.aclose.assert_awaited_once()

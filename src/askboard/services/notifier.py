"""Change notification fan-out for question channels.

This module provides the ChangeNotifier that pushes vote counter and comment
mutations to every observer of a question. It includes:

- In-process subscriptions backed by bounded asyncio queues
- An optional Redis relay so several API processes share one event stream
- A background listener that feeds relayed events to local subscribers

Events carry full values (never diffs) and may arrive more than once or out of
order; consumers treat each one as "this key's latest state" and reconcile.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import secrets
import threading
from collections import defaultdict
from collections.abc import Callable, Collection
from typing import Any

import redis
import redis.asyncio as aioredis
from pydantic import ValidationError

from askboard.core.settings import settings
from askboard.models.comment import Comment
from askboard.schemas.comment import CommentResponse
from askboard.schemas.events import ChangeEvent, EventKind, EventTable

# Configure logger for this module
logger = logging.getLogger(__name__)

EventPredicate = Callable[[ChangeEvent], bool]


class Subscription:
    """A single observer's view of one question channel.

    Subscriptions must be created on a running event loop; events published
    from other threads are handed to that loop with ``call_soon_threadsafe``.
    When the queue is full the oldest pending event is discarded.
    """

    def __init__(
        self,
        notifier: ChangeNotifier,
        question_id: int,
        *,
        tables: Collection[EventTable] | None = None,
        predicate: EventPredicate | None = None,
        maxsize: int = 256,
    ) -> None:
        self.question_id = question_id
        self.tables = frozenset(tables) if tables else None
        self.predicate = predicate
        self.dropped = 0
        self._notifier = notifier
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=max(1, maxsize))
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def matches(self, event: ChangeEvent) -> bool:
        """Return True if this subscription wants ``event``."""
        if event.question_id != self.question_id:
            return False
        if self.tables is not None and event.table not in self.tables:
            return False
        return self.predicate is None or self.predicate(event)

    def deliver(self, event: ChangeEvent | None) -> None:
        """Queue ``event`` from any thread."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._offer(event)
            return

        try:
            self._loop.call_soon_threadsafe(self._offer, event)
        except RuntimeError:
            # The owning loop is gone; nobody can read from this queue anymore.
            logger.warning(
                "Dropping subscription on question %s: event loop closed", self.question_id
            )
            self._closed = True
            self._notifier.unsubscribe(self)

    def _offer(self, event: ChangeEvent | None) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(event)

    async def get(self) -> ChangeEvent | None:
        """Wait for the next event; None once the subscription is closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        """Detach from the notifier and wake any pending reader."""
        if self._closed:
            return
        self._closed = True
        self._notifier.unsubscribe(self)
        self.deliver(None)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class RedisEventRelay:
    """Publishes events to Redis so other API processes can fan them out."""

    def __init__(
        self,
        client: redis.Redis | None = None,
        *,
        channel_prefix: str | None = None,
        origin: str | None = None,
    ) -> None:
        self._client = client
        self.channel_prefix = channel_prefix or settings.notifier_channel_prefix
        self.origin = origin or secrets.token_hex(8)

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            # Publishing runs on the event loop thread; never wait on the OS TCP timeout.
            self._client = redis.from_url(
                settings.redis_url,
                socket_connect_timeout=settings.redis_connect_timeout,
                socket_timeout=settings.redis_socket_timeout,
            )
        return self._client

    def channel_for(self, question_id: int) -> str:
        return f"{self.channel_prefix}:{question_id}"

    @property
    def pattern(self) -> str:
        return f"{self.channel_prefix}:*"

    def encode(self, event: ChangeEvent) -> str:
        return json.dumps(
            {"origin": self.origin, "event": event.model_dump(mode="json", by_alias=True)}
        )

    def decode(self, raw: bytes | str) -> tuple[str | None, ChangeEvent] | None:
        """Parse a relayed message; None if it is malformed."""
        try:
            envelope: dict[str, Any] = json.loads(raw)
            return envelope.get("origin"), ChangeEvent.model_validate(envelope["event"])
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            logger.warning("Ignoring malformed relayed event: %s", exc)
            return None

    def publish(self, event: ChangeEvent) -> bool:
        """Send ``event`` to Redis; False if Redis could not be reached."""
        try:
            self.client.publish(self.channel_for(event.question_id), self.encode(event))
        except redis.RedisError as exc:
            logger.warning(
                "Redis relay failed for question %s: %s", event.question_id, exc
            )
            return False
        return True


class ChangeNotifier:
    """Broadcast channels keyed by question id."""

    def __init__(
        self,
        *,
        queue_size: int | None = None,
        relay: RedisEventRelay | None = None,
    ) -> None:
        self.queue_size = queue_size or settings.notifier_queue_size
        self.relay = relay
        self._channels: dict[int, set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def subscribe(
        self,
        question_id: int,
        *,
        tables: Collection[EventTable] | None = None,
        predicate: EventPredicate | None = None,
    ) -> Subscription:
        """Open a subscription on ``question_id``; must run inside an event loop."""
        subscription = Subscription(
            self,
            question_id,
            tables=tables,
            predicate=predicate,
            maxsize=self.queue_size,
        )
        with self._lock:
            self._channels[question_id].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._channels.get(subscription.question_id)
            if subscribers is None:
                return
            subscribers.discard(subscription)
            if not subscribers:
                del self._channels[subscription.question_id]

    def subscriber_count(self, question_id: int) -> int:
        with self._lock:
            return len(self._channels.get(question_id, ()))

    def publish(self, event: ChangeEvent) -> None:
        """Deliver ``event`` to local subscribers and, if configured, the relay.

        Returns once the event is queued everywhere; it does not wait for
        consumers to read it.
        """
        self.dispatch(event)
        if self.relay is not None:
            self.relay.publish(event)

    def dispatch(self, event: ChangeEvent) -> int:
        """Queue ``event`` for matching local subscribers and return how many."""
        with self._lock:
            targets = [s for s in self._channels.get(event.question_id, ()) if s.matches(event)]
        for subscription in targets:
            subscription.deliver(event)
        return len(targets)

    def publish_vote_count(self, question_id: int, vote_count: int) -> ChangeEvent:
        """Announce a question's new counter value."""
        event = ChangeEvent(
            question_id=question_id,
            table="questions",
            kind="update",
            vote_count=vote_count,
        )
        self.publish(event)
        return event

    def publish_comment(self, kind: EventKind, comment: Comment | CommentResponse) -> ChangeEvent:
        """Announce an inserted, updated or deleted comment row."""
        row = CommentResponse.model_validate(comment)
        event = ChangeEvent(
            question_id=row.question_id,
            table="comments",
            kind=kind,
            comment=row,
        )
        self.publish(event)
        return event


class RedisEventListener:
    """Background task feeding events relayed by other processes to local subscribers."""

    def __init__(
        self,
        notifier: ChangeNotifier,
        relay: RedisEventRelay,
        client: aioredis.Redis | None = None,
    ) -> None:
        self.notifier = notifier
        self.relay = relay
        self._client = client
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the listening loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the listening loop and close the connection."""
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def handle_message(self, message: dict[str, Any]) -> bool:
        """Dispatch one pub/sub message; True if it reached local subscribers."""
        if message.get("type") not in ("message", "pmessage"):
            return False
        decoded = self.relay.decode(message["data"])
        if decoded is None:
            return False
        origin, event = decoded
        if origin == self.relay.origin:
            # Already dispatched locally by ChangeNotifier.publish.
            return False
        self.notifier.dispatch(event)
        return True

    async def _run(self) -> None:
        if self._client is None:
            # No socket_timeout: idle subscriptions are polled with get_message(timeout=...).
            self._client = aioredis.from_url(
                settings.redis_url,
                socket_connect_timeout=settings.redis_connect_timeout,
            )
        backoff = 1.0

        while not self._stopping.is_set():
            pubsub = self._client.pubsub()
            try:
                await pubsub.psubscribe(self.relay.pattern)
                backoff = 1.0
                while not self._stopping.is_set():
                    message = await pubsub.get_message(
                        ignore_subscribe_messages=True,
                        timeout=1.0,
                    )
                    if message is not None:
                        self.handle_message(message)
            except (redis.RedisError, OSError) as exc:
                logger.warning("RedisEventListener connection error: %s", exc)
            except Exception:
                logger.exception("RedisEventListener failed unexpectedly; restarting")
            else:
                continue
            finally:
                await pubsub.aclose()

            await self._wait_backoff(backoff)
            backoff = min(backoff * 2, 30.0)

    async def _wait_backoff(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, returning early when stopped."""
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stopping.wait(), timeout=delay)


class _NotifierSingleton:
    """Singleton wrapper for ChangeNotifier."""

    _instance: ChangeNotifier | None = None

    @classmethod
    def get_instance(cls) -> ChangeNotifier:
        """Get or create the process-wide ChangeNotifier."""
        if cls._instance is None:
            relay = RedisEventRelay() if settings.notifier_redis_enabled else None
            cls._instance = ChangeNotifier(relay=relay)
        return cls._instance


def get_notifier() -> ChangeNotifier:
    """Return the process-wide change notifier."""
    return _NotifierSingleton.get_instance()


__all__ = [
    "ChangeNotifier",
    "EventPredicate",
    "RedisEventListener",
    "RedisEventRelay",
    "Subscription",
    "get_notifier",
]

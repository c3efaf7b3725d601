"""Websocket stream of change events for a question."""

import asyncio
import contextlib
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from askboard.api.v1.dependencies import NotifierDep
from askboard.services.notifier import Subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    async for event in subscription:
        await websocket.send_json(event.model_dump(mode="json", by_alias=True))


@router.websocket("/questions/{question_id}")
async def stream_question_events(
    websocket: WebSocket,
    question_id: int,
    notifier: NotifierDep,
) -> None:
    """Push every vote and comment change on ``question_id`` to the client.

    Messages are full-value ``ChangeEvent`` payloads; clients replace their
    copy of the referenced key and re-sort the thread. Anything the client
    sends is ignored; the socket only reads to notice disconnects.
    """
    await websocket.accept()
    async with notifier.subscribe(question_id) as subscription:
        forwarder = asyncio.create_task(_forward(websocket, subscription))
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.debug("Realtime client left question %s", question_id)
        finally:
            forwarder.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await forwarder

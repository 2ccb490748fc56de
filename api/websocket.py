"""
WebSocket Endpoint

連線後立即送出 state 事件（目前回合 + 顯示資訊 + 權重），
之後 preview / reveal 由排程器透過 broadcaster 推送

Client 可以送 {"op": "state"} 重新索取快照；
其他訊息（非 JSON、binary frame、未知 op）一律忽略，連線保持
"""
from fastapi import APIRouter, WebSocket
import json
import logging

from core.broadcast import EVENT_STATE
from core.container import AppContainer

router = APIRouter(tags=["websocket"])
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def observer_socket(websocket: WebSocket):
    container: AppContainer = websocket.app.state.container
    broadcaster = container.broadcaster

    await broadcaster.connect(websocket)
    try:
        await broadcaster.send_to(websocket, EVENT_STATE, container.state_payload())

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            text = message.get("text")
            if text is None:
                # binary frame
                continue
            try:
                obj = json.loads(text)
            except ValueError:
                logger.debug(f"Ignoring non-JSON frame: {text[:64]!r}")
                continue

            if isinstance(obj, dict) and obj.get("op") == "state":
                await broadcaster.send_to(websocket, EVENT_STATE, container.state_payload())

    finally:
        await broadcaster.disconnect(websocket)

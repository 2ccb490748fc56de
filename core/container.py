"""
AppContainer：組裝並持有整個服務的共享物件

StateStore、Broadcaster、RoundScheduler 都在這裡建立一次，
再由 FastAPI 的 dependency 注入到各個 endpoint，避免全域變數
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict

from fastapi import Request

from config import Settings
from core.broadcast import WebSocketBroadcaster
from core.round_scheduler import RoundScheduler
from core.state_store import StateStore
from schemas import RoundStateResponse, StateResponse
from services.audit_service import generate_server_salt
from services.entropy_service import SystemEntropySource
from services.sampler_service import digit_probabilities

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    store: StateStore
    broadcaster: WebSocketBroadcaster
    scheduler: RoundScheduler
    server_salt: str

    def build_state(self) -> StateResponse:
        """目前的公開狀態（GET /api/state 與 WebSocket 的 state 事件共用）"""
        snapshot = self.store.get_snapshot()
        upcoming = snapshot["upcoming"]
        weights = list(snapshot["weights"])

        return StateResponse(
            upcoming=RoundStateResponse.from_state(upcoming) if upcoming else None,
            display_name=self.settings.display_name,
            display_id=self.settings.display_id,
            weights=weights,
            probabilities=digit_probabilities(weights),
            server_salt=self.server_salt,
        )

    def state_payload(self) -> Dict[str, Any]:
        return self.build_state().model_dump(by_alias=True)


def build_container(settings: Settings) -> AppContainer:
    store = StateStore(settings.initial_weights)
    broadcaster = WebSocketBroadcaster()
    server_salt = generate_server_salt()

    scheduler = RoundScheduler(
        store=store,
        entropy_source=SystemEntropySource(provider=settings.provider),
        broadcaster=broadcaster,
        server_salt=server_salt,
        interval_ms=settings.round_interval_ms,
        preview_lead_ms=settings.preview_lead_ms,
        retry_backoff_ms=settings.retry_backoff_ms,
        entropy_bytes=settings.entropy_bytes,
    )

    logger.info(f"Container built (server salt {server_salt})")
    return AppContainer(
        settings=settings,
        store=store,
        broadcaster=broadcaster,
        scheduler=scheduler,
        server_salt=server_salt,
    )


def get_container(request: Request) -> AppContainer:
    """FastAPI dependency：取得 app 的 AppContainer"""
    return request.app.state.container

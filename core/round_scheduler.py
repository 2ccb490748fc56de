"""
RoundScheduler：預告 -> 揭曉 的循環排程

狀態機：
    IDLE -> WAITING_FOR_PREVIEW -> WAITING_FOR_REVEAL -> REVEAL_EMITTED
         -> WAITING_FOR_PREVIEW -> ...

每一輪：
1. 計算嚴格晚於現在（也晚於上一輪）的分鐘邊界
2. 睡到「邊界 - 35 秒」（已經過了就立即執行）
3. 取亂數、抽數字、算 hash，建立 RoundState，寫入 StateStore，送出 preview
4. 睡到邊界，送出 reveal（數字與 hash 與 preview 相同）

規則：
- 用明確的 asyncio loop，不用 callback 自我重排
- 每次等待都從 wall-clock 重新計算，不累積 timer 誤差
- 一輪內任何異常都在 run() 捕捉、記錄，等 backoff 後重試；失敗的回合不送任何事件
- 權重在回合開始時只讀一次，之後的更新只影響下一輪
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from models import RoundState, SchedulerPhase
from schemas import PreviewEvent, RevealEvent
from core.broadcast import BroadcastPort, EVENT_PREVIEW, EVENT_REVEAL
from core.state_store import StateStore
from services.audit_service import compute_public_hash
from services.entropy_service import EntropySource
from services.sampler_service import pick_weighted_digit
from services.timing_service import (
    MINUTE_MS,
    next_minute_boundary,
    now_ms,
    preview_instant,
    to_iso,
)

logger = logging.getLogger(__name__)


class RoundScheduler:
    """單一時間線的回合排程器（同一時間只會有一個回合在進行）"""

    def __init__(
        self,
        store: StateStore,
        entropy_source: EntropySource,
        broadcaster: BroadcastPort,
        server_salt: str,
        interval_ms: int = MINUTE_MS,
        preview_lead_ms: int = 35000,
        retry_backoff_ms: int = 5000,
        entropy_bytes: int = 16,
        clock: Callable[[], int] = now_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._store = store
        self._entropy = entropy_source
        self._broadcaster = broadcaster
        self._salt = server_salt
        self._interval_ms = interval_ms
        self._preview_lead_ms = preview_lead_ms
        self._retry_backoff_ms = retry_backoff_ms
        self._entropy_bytes = entropy_bytes
        self._clock = clock
        self._sleep = sleep

        self.phase = SchedulerPhase.IDLE
        self._last_boundary: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    # --------------------------
    # Timing
    # --------------------------

    def plan_next_boundary(self, now: int) -> int:
        """下一個分鐘邊界；保證嚴格晚於上一輪用過的邊界"""
        boundary = next_minute_boundary(now, self._interval_ms)
        if self._last_boundary is not None and boundary <= self._last_boundary:
            boundary = self._last_boundary + self._interval_ms
        return boundary

    async def _sleep_until(self, target_ms: int) -> None:
        wait = max(0, target_ms - self._clock())
        await self._sleep(wait / 1000)

    # --------------------------
    # Round
    # --------------------------

    def draw_round(self, boundary_ms: int) -> RoundState:
        """
        產生一個回合（純計算 + 一次亂數）

        異常：
            EntropyUnavailable: 亂數來源失敗
            InvalidWeights: 權重總和為 0
        """
        weights = self._store.get_weights()
        sample = self._entropy.sample(self._entropy_bytes)
        entropy_hex = sample.hex()
        boundary_iso = to_iso(boundary_ms)

        digit = pick_weighted_digit(weights, sample)
        digest = compute_public_hash(self._salt, entropy_hex, boundary_iso, weights)

        return RoundState(
            minute_boundary=boundary_iso,
            digit=digit,
            hash=digest,
            entropy_hex=entropy_hex,
            provider=self._entropy.name,
            weights=weights,
        )

    async def run_cycle(self) -> RoundState:
        """跑完一整輪（preview + reveal），返回該輪的 RoundState"""
        self.phase = SchedulerPhase.WAITING_FOR_PREVIEW

        while True:
            now = self._clock()
            boundary = self.plan_next_boundary(now)
            preview_at = preview_instant(boundary, self._preview_lead_ms)
            wait = max(0, preview_at - now)
            logger.info(f"Scheduling next preview in {wait} ms (boundary {to_iso(boundary)})")

            await self._sleep_until(preview_at)

            if self._clock() < boundary:
                break
            # 睡過頭（例如主機暫停），邊界已過就換下一個
            logger.warning(f"Woke after boundary {to_iso(boundary)}, rescheduling")
            self._last_boundary = boundary

        state = self.draw_round(boundary)
        self._store.publish_round(state)
        self._last_boundary = boundary

        preview = PreviewEvent(
            minute_boundary=state.minute_boundary,
            preview_at=to_iso(preview_at),
            digit=state.digit,
            provider=state.provider,
            hash=state.hash,
        )
        await self._broadcaster.emit(EVENT_PREVIEW, preview.model_dump(by_alias=True))
        logger.info(f"Preview emitted: digit={state.digit} boundary={state.minute_boundary} hash={state.hash}")
        self.phase = SchedulerPhase.WAITING_FOR_REVEAL

        await self._sleep_until(boundary)

        reveal = RevealEvent(
            minute_boundary=state.minute_boundary,
            reveal_at=to_iso(boundary),
            digit=state.digit,
            provider=state.provider,
            hash=state.hash,
        )
        await self._broadcaster.emit(EVENT_REVEAL, reveal.model_dump(by_alias=True))
        logger.info(f"Reveal emitted: digit={state.digit} boundary={state.minute_boundary}")
        self.phase = SchedulerPhase.REVEAL_EMITTED

        return state

    async def run(self, max_cycles: Optional[int] = None) -> None:
        """
        主迴圈

        參數：
            max_cycles: 最多嘗試幾輪（含失敗的輪）；None 表示永遠執行
        """
        attempts = 0
        while max_cycles is None or attempts < max_cycles:
            attempts += 1
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(
                    f"Round cycle failed, retrying in {self._retry_backoff_ms} ms: {e}",
                    exc_info=True
                )
                await self._sleep(self._retry_backoff_ms / 1000)

    # --------------------------
    # Lifecycle
    # --------------------------

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="round-scheduler")
            logger.info("Round scheduler started")
        return self._task

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self.phase = SchedulerPhase.IDLE
        logger.info("Round scheduler stopped")

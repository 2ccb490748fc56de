"""共用的測試替身：假時鐘、固定亂數、記錄事件的 broadcaster、假 WebSocket"""
import os

# API 測試不跑背景排程（避免真實回合與測試資料互相覆蓋）
os.environ.setdefault("DIGIT_SCHEDULER_ENABLED", "false")

import asyncio
from typing import Any, Dict, List, Tuple

import pytest

from core.broadcast import BroadcastPort
from core.exceptions import EntropyUnavailable
from core.state_store import StateStore
from models import EntropySample
from services.entropy_service import EntropySource

DEFAULT_WEIGHTS = [5, 5, 5, 20, 5, 5, 5, 1, 5, 4]


class FakeClock:
    """epoch 毫秒的假時鐘；sleep 直接把時間往前推"""

    def __init__(self, start_ms: int):
        self.now = start_ms
        self.sleeps: List[float] = []

    def __call__(self) -> int:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += int(round(seconds * 1000))


class RecordingBroadcaster(BroadcastPort):
    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    async def emit(self, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((event, payload))

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]


class SequenceEntropySource(EntropySource):
    """依序回傳預先給定的位元組"""

    def __init__(self, samples: List[bytes]):
        self._samples = list(samples)
        self.calls = 0

    @property
    def name(self) -> str:
        return "fixed"

    def sample(self, n: int) -> EntropySample:
        self.calls += 1
        return EntropySample(self._samples.pop(0))


class FlakyEntropySource(SequenceEntropySource):
    """前 failures 次呼叫失敗，之後依序回傳"""

    def __init__(self, failures: int, samples: List[bytes]):
        super().__init__(samples)
        self._failures = failures

    def sample(self, n: int) -> EntropySample:
        if self._failures > 0:
            self._failures -= 1
            self.calls += 1
            raise EntropyUnavailable("entropy pool offline")
        return super().sample(n)


class FakeSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


class StalledSocket(FakeSocket):
    """send_json never returns (peer stopped reading, TCP buffer full)."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    async def send_json(self, data):
        self.attempts += 1
        await asyncio.Event().wait()


async def settle():
    # let sender tasks drain their queues
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def store():
    return StateStore(DEFAULT_WEIGHTS)


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()

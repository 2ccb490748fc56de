"""
領域模型

這裡只放純資料結構，不含任何 I/O：
- WeightVector：10 個非負整數，index 即數字
- EntropySample：一次回合用的隨機位元組
- RoundState：一個回合公開的狀態（預告時建立，之後不可變）
- SchedulerPhase：排程器狀態機
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

DIGIT_COUNT = 10

WeightVector = Tuple[int, ...]


class SchedulerPhase(str, Enum):
    IDLE = "IDLE"
    WAITING_FOR_PREVIEW = "WAITING_FOR_PREVIEW"
    WAITING_FOR_REVEAL = "WAITING_FOR_REVEAL"
    REVEAL_EMITTED = "REVEAL_EMITTED"


@dataclass(frozen=True)
class EntropySample:
    """一次性的隨機位元組（每回合只用一次）"""
    data: bytes = field(repr=False)

    def __len__(self) -> int:
        return len(self.data)

    def hex(self) -> str:
        return self.data.hex()


@dataclass(frozen=True)
class RoundState:
    """
    一個回合的公開狀態

    在預告（preview）時建立，之後不會再修改；
    下一回合會建立新的 RoundState 取代它。
    """
    minute_boundary: str
    digit: int
    hash: str
    entropy_hex: str
    provider: str
    # 回合開始時讀到的權重（hash 就是用這組算的）
    weights: WeightVector = ()

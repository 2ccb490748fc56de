"""
StateStore：持有目前的權重與最新一回合的 RoundState

並發模型：
- 權重以不可變 tuple 保存，更新時整個替換 reference
- 寫入（管理端更新權重）用 threading.Lock 序列化；
  FastAPI 的同步 endpoint 跑在 threadpool，可能同時進來
- 讀取只需讀一次 reference，不需要鎖
"""
import logging
import math
import threading
from numbers import Real
from typing import Any, Dict, Optional, Sequence

from models import DIGIT_COUNT, RoundState, WeightVector
from core.exceptions import InvalidWeights

logger = logging.getLogger(__name__)


def coerce_weight(value: Any) -> int:
    """
    把單一權重轉成非負整數

    規則：
    - bool: True -> 1, False -> 0
    - 有限數字: 取整數部分，負數 -> 0
    - 字串: 能解析成數字就照上面規則，否則 -> 0
    - 其他（None、NaN、inf、物件）-> 0
    """
    if isinstance(value, bool):
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return 0

    if not isinstance(value, Real):
        return 0

    if isinstance(value, float) and not math.isfinite(value):
        return 0

    return max(0, int(value))


def normalize_weights(raw: Any) -> WeightVector:
    """
    驗證並正規化一組權重

    異常：
        InvalidWeights: 不是陣列，或長度不是 10
    """
    if not isinstance(raw, (list, tuple)):
        raise InvalidWeights()
    if len(raw) != DIGIT_COUNT:
        raise InvalidWeights()
    return tuple(coerce_weight(v) for v in raw)


class StateStore:
    """權重與最新回合狀態的持有者（注入給排程器與 API）"""

    def __init__(self, initial_weights: Sequence[Any]):
        self._weights: WeightVector = normalize_weights(list(initial_weights))
        self._upcoming: Optional[RoundState] = None
        self._lock = threading.Lock()

    def get_weights(self) -> WeightVector:
        return self._weights

    def set_weights(self, raw: Any) -> WeightVector:
        """
        整批替換權重

        驗證失敗時拋出 InvalidWeights，既有權重不變

        返回：
            實際生效的權重
        """
        weights = normalize_weights(raw)
        with self._lock:
            previous = self._weights
            self._weights = weights

        logger.info(f"Weights updated: {list(previous)} -> {list(weights)}")
        return weights

    def publish_round(self, state: RoundState) -> None:
        """以新回合取代目前的 upcoming（不修改舊的 RoundState）"""
        with self._lock:
            self._upcoming = state

    def get_upcoming(self) -> Optional[RoundState]:
        return self._upcoming

    def get_snapshot(self) -> Dict[str, Any]:
        """給新連線觀察者的快照：{weights, upcoming}"""
        with self._lock:
            return {
                "weights": self._weights,
                "upcoming": self._upcoming,
            }

"""
加權抽樣服務：把隨機位元組 + 權重對應到 0-9 的數字

純計算邏輯，相同輸入永遠得到相同輸出（inverse-CDF）
"""
import logging
from typing import List, Sequence

from models import DIGIT_COUNT, EntropySample
from core.exceptions import InvalidWeights, InternalInvariantViolation

logger = logging.getLogger(__name__)

FALLBACK_DIGIT = 9
ENTROPY_PREFIX_BYTES = 8


def pick_weighted_digit(weights: Sequence[int], entropy: EntropySample) -> int:
    """
    依權重抽出一個數字

    演算法：
    1. 取 entropy 前 8 bytes，以 big-endian 無號整數解讀為 v
    2. total = sum(weights)，r = v mod total
    3. 由 0 到 9 累加權重，回傳第一個累加值 > r 的數字

    例子（weights = [5,5,5,20,5,5,5,1,5,4]，total = 60）：
        r = 0..4   -> 0
        r = 15..34 -> 3
        r = 55     -> 7
        r = 56..59 -> 9

    權重為 0 的數字永遠不會被抽中。

    參數：
        weights: 長度 10 的非負整數
        entropy: 至少 8 bytes 的 EntropySample

    返回：
        0-9 的數字

    異常：
        InvalidWeights: 長度不是 10 或總和為 0
        ValueError: entropy 不足 8 bytes
    """
    if len(weights) != DIGIT_COUNT:
        raise InvalidWeights(f"Expected {DIGIT_COUNT} weights, got {len(weights)}")

    total = sum(weights)
    if total <= 0:
        raise InvalidWeights(f"Sum of weights must be positive, got {total}")

    if len(entropy) < ENTROPY_PREFIX_BYTES:
        raise ValueError(
            f"Entropy sample must be at least {ENTROPY_PREFIX_BYTES} bytes, got {len(entropy)}"
        )

    v = int.from_bytes(entropy.data[:ENTROPY_PREFIX_BYTES], "big")
    r = v % total

    acc = 0
    for digit, weight in enumerate(weights):
        acc += weight
        if r < acc:
            return digit

    # r < total 時走不到這裡
    violation = InternalInvariantViolation(
        f"Weighted walk fell through (r={r}, total={total}), using fallback {FALLBACK_DIGIT}"
    )
    logger.error(str(violation))
    return FALLBACK_DIGIT


def digit_probabilities(weights: Sequence[int]) -> List[float]:
    """每個數字被抽中的機率（weight[d] / total）；總和為 0 時全為 0"""
    total = sum(weights)
    if total <= 0:
        return [0.0] * len(weights)
    return [w / total for w in weights]

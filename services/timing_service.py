"""
時間服務：分鐘邊界計算

所有時間都以 epoch 毫秒（int）表示
"""
import time
from datetime import datetime, timezone

MINUTE_MS = 60000


def now_ms() -> int:
    """目前的 wall-clock 時間（epoch 毫秒）"""
    return int(time.time() * 1000)


def next_minute_boundary(now: int, interval_ms: int = MINUTE_MS) -> int:
    """
    取得嚴格晚於 now 的下一個分鐘邊界

    範例：
        next_minute_boundary(0)      -> 60000
        next_minute_boundary(59999)  -> 60000
        next_minute_boundary(60000)  -> 120000（剛好在邊界上也往後推）
    """
    return (now // interval_ms + 1) * interval_ms


def preview_instant(boundary_ms: int, lead_ms: int = 35000) -> int:
    """邊界前 lead_ms 的預告時間"""
    return boundary_ms - lead_ms


def to_iso(ms: int) -> str:
    """
    epoch 毫秒轉 ISO-8601（UTC，毫秒精度，Z 結尾）

    範例：
        to_iso(60000) -> "1970-01-01T00:01:00.000Z"
    """
    dt = datetime.fromtimestamp(ms // 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ms % 1000:03d}Z"

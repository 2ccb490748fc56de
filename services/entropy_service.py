"""
亂數來源服務：提供每回合使用的強隨機位元組

只使用作業系統的 CSPRNG（secrets），失敗時直接拋出，不退回弱亂數
"""
import secrets
import logging
from abc import ABC, abstractmethod

from models import EntropySample
from core.exceptions import EntropyUnavailable

logger = logging.getLogger(__name__)

MIN_SAMPLE_BYTES = 8


class EntropySource(ABC):
    """亂數來源介面"""

    @property
    @abstractmethod
    def name(self) -> str:
        """provider 標籤（會出現在 RoundState 與事件裡）"""

    @abstractmethod
    def sample(self, n: int) -> EntropySample:
        """取得 n bytes 的強隨機資料"""


class SystemEntropySource(EntropySource):
    """
    使用 secrets.token_bytes（作業系統 CSPRNG）

    參數：
        provider: 對外顯示的 provider 標籤
    """

    def __init__(self, provider: str = "secrets"):
        self._provider = provider

    @property
    def name(self) -> str:
        return self._provider

    def sample(self, n: int) -> EntropySample:
        """
        取得 n bytes 的隨機資料

        異常：
            ValueError: n < 8
            EntropyUnavailable: 系統亂數來源失敗
        """
        if n < MIN_SAMPLE_BYTES:
            raise ValueError(f"Entropy sample must be at least {MIN_SAMPLE_BYTES} bytes, got {n}")

        try:
            data = secrets.token_bytes(n)
        except (OSError, NotImplementedError) as e:
            logger.error(f"System entropy source failed: {e}", exc_info=True)
            raise EntropyUnavailable(f"System entropy source failed: {e}") from e

        return EntropySample(data)

from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    display_name: str = "Jai Shree SHYAM"
    display_id: str = "ID-001234"

    # 0..9 的權重，數字越大越容易被抽中
    initial_weights: List[int] = [5, 5, 5, 20, 5, 5, 5, 1, 5, 4]

    # 時間設定（毫秒）
    round_interval_ms: int = 60000
    preview_lead_ms: int = 35000
    retry_backoff_ms: int = 5000

    # 抽樣至少要用前 8 bytes
    entropy_bytes: int = Field(16, ge=8)
    scheduler_enabled: bool = True
    provider: str = "secrets"

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    class Config:
        env_file = ".env"
        env_prefix = "DIGIT_"


@lru_cache()
def get_settings():
    return Settings()

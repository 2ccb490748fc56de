"""
API / 事件的資料格式（pydantic）

對外一律使用 camelCase（與前端既有的 Socket 事件相容）
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import RoundState


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RoundStateResponse(CamelModel):
    minute_boundary: str = Field(alias="minuteBoundary")
    digit: int
    hash: str
    entropy_hex: str = Field(alias="entropyHex")
    provider: str
    weights: List[int]

    @classmethod
    def from_state(cls, state: RoundState) -> "RoundStateResponse":
        return cls(
            minute_boundary=state.minute_boundary,
            digit=state.digit,
            hash=state.hash,
            entropy_hex=state.entropy_hex,
            provider=state.provider,
            weights=list(state.weights),
        )


class StateResponse(CamelModel):
    upcoming: Optional[RoundStateResponse] = None
    display_name: str = Field(alias="displayName")
    display_id: str = Field(alias="displayId")
    weights: List[int]
    probabilities: List[float]
    server_salt: str = Field(alias="serverSalt")


class WeightsResponse(BaseModel):
    ok: bool = True
    weights: List[int]


class VerifyRequest(CamelModel):
    entropy_hex: str = Field(alias="entropyHex")
    minute_boundary: str = Field(alias="minuteBoundary")
    weights: List[int]
    hash: str


class VerifyResponse(BaseModel):
    valid: bool
    hash: str
    digit: int


class PreviewEvent(CamelModel):
    minute_boundary: str = Field(alias="minuteBoundary")
    preview_at: str = Field(alias="previewAt")
    digit: int
    provider: str
    hash: str


class RevealEvent(CamelModel):
    minute_boundary: str = Field(alias="minuteBoundary")
    reveal_at: str = Field(alias="revealAt")
    digit: int
    provider: str
    hash: str

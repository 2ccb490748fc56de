"""
State API Endpoints

職責：
1. 查詢目前狀態（upcoming 回合、顯示資訊、權重）
2. 更新權重（管理端，無驗證）
3. 驗證已公布回合的 hash
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any
import logging

from core.container import AppContainer, get_container
from core.exceptions import InvalidWeights
from models import EntropySample
from schemas import (
    StateResponse,
    WeightsResponse,
    VerifyRequest,
    VerifyResponse,
)
from services.audit_service import compute_public_hash, verify_public_hash
from services.sampler_service import pick_weighted_digit

router = APIRouter(prefix="/api", tags=["state"])
logger = logging.getLogger(__name__)


@router.get("/state", response_model=StateResponse)
def get_state(container: AppContainer = Depends(get_container)):
    """
    取得目前狀態

    返回：
        - upcoming: 最新回合（尚未有回合時為 null）
        - displayName / displayId: 顯示資訊
        - weights: 目前權重
        - probabilities: 每個數字的機率
        - serverSalt: 用來重算 hash 的 salt
    """
    try:
        return container.build_state()
    except Exception as e:
        logger.error(f"Failed to get state: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/weights", response_model=WeightsResponse)
def update_weights(body: Any = Body(None), container: AppContainer = Depends(get_container)):
    """
    整批替換權重（只影響之後的回合）

    規則：
    - body 必須是 {"weights": [...]}，weights 必須是長度 10 的陣列，
      否則一律 400（包含 body 不是物件的情況），且權重不變
    - 每個元素轉成非負整數，無法轉換的視為 0
    """
    raw = body.get("weights") if isinstance(body, dict) else None
    try:
        weights = container.store.set_weights(raw)
        return WeightsResponse(ok=True, weights=list(weights))

    except InvalidWeights as e:
        logger.warning(f"Rejected weights update: {body!r}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update weights: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/verify", response_model=VerifyResponse)
def verify_round(body: VerifyRequest, container: AppContainer = Depends(get_container)):
    """
    用公開資料重算 hash 與數字

    任何人拿到 entropyHex、minuteBoundary、weights 與 serverSalt 都能自己算，
    這個 endpoint 只是方便用
    """
    try:
        entropy = EntropySample(bytes.fromhex(body.entropy_hex))
        digit = pick_weighted_digit(body.weights, entropy)
    except (ValueError, InvalidWeights) as e:
        raise HTTPException(status_code=400, detail=str(e))

    recomputed = compute_public_hash(
        container.server_salt, body.entropy_hex, body.minute_boundary, body.weights
    )
    valid = verify_public_hash(
        body.hash, container.server_salt, body.entropy_hex, body.minute_boundary, body.weights
    )
    return VerifyResponse(valid=valid, hash=recomputed, digit=digit)

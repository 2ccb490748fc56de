"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層與排程器統一處理
"""


class DigitDrawException(Exception):
    """所有抽號異常的基類"""
    pass


# ============ 亂數來源相關異常 ============

class EntropyUnavailable(DigitDrawException):
    """系統亂數來源無法使用（該回合失敗，由排程器重試）"""
    pass


# ============ 權重相關異常 ============

class InvalidWeights(DigitDrawException):
    """權重格式錯誤（不是長度 10 的陣列），或總和為 0 無法抽樣"""
    def __init__(self, message="weights must be array of 10 numbers"):
        super().__init__(message)


# ============ 內部不變量異常 ============

class InternalInvariantViolation(DigitDrawException):
    """
    加權抽樣走完 0..9 仍沒有命中

    理論上 r < total 時不可能發生；只記錄，不中斷回合
    """
    pass

"""
服務層

這個 package 包含純計算邏輯，不負責排程與狀態：
- EntropyService：強隨機位元組來源
- SamplerService：加權抽樣
- AuditService：公開 hash 計算與驗證
- TimingService：分鐘邊界計算
"""

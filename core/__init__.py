"""
核心邏輯層

這個 package 包含回合排程與共享狀態，包括：
- RoundScheduler：預告/揭曉的狀態機與主迴圈
- StateStore：權重與最新回合狀態
- Broadcast：事件推送給所有觀察者
- Container：組裝共享物件
"""

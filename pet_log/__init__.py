"""宠物照护日志：宠物、活动记录与提醒的本地存储。"""
__version__ = "0.1.0"

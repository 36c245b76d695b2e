"""首页概览与提醒状态文案。"""
from pet_log.dashboard.status import activity_icon, format_duration, is_reminder_overdue, reminder_status
from pet_log.dashboard.summary import DashboardSummary, build_summary, recent_activities, upcoming_reminders

__all__ = [
    "activity_icon",
    "format_duration",
    "is_reminder_overdue",
    "reminder_status",
    "DashboardSummary",
    "build_summary",
    "recent_activities",
    "upcoming_reminders",
]

"""提醒状态、相对时间文案与活动图标。"""
from datetime import datetime, timedelta
from typing import Optional

from pet_log.store.models import PetActivity, PetReminder, utc_now

# 关键字 -> 图标，按顺序匹配
_ACTIVITY_ICONS = (
    (("feed",), "🍽️"),
    (("walk", "stroll"), "🚶"),
    (("med",), "💊"),
)
_DEFAULT_ICON = "🐾"


def _round_at_least_one(value: float) -> int:
    return max(1, int(round(value)))


def format_duration(span: timedelta) -> str:
    """时长文案：moments / N minutes / N hours / N days。"""
    seconds = span.total_seconds()
    if seconds < 60:
        return "moments"
    if seconds < 3600:
        minutes = _round_at_least_one(seconds / 60)
        return "1 minute" if minutes == 1 else f"{minutes} minutes"
    if seconds < 86400:
        hours = _round_at_least_one(seconds / 3600)
        return "1 hour" if hours == 1 else f"{hours} hours"
    days = _round_at_least_one(seconds / 86400)
    return "1 day" if days == 1 else f"{days} days"


def format_relative_past(timestamp: datetime, now: Optional[datetime] = None) -> str:
    seconds = ((now or utc_now()) - timestamp).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = _round_at_least_one(seconds / 60)
        return "1 minute ago" if minutes == 1 else f"{minutes} minutes ago"
    if seconds < 86400:
        hours = _round_at_least_one(seconds / 3600)
        return "1 hour ago" if hours == 1 else f"{hours} hours ago"
    days = _round_at_least_one(seconds / 86400)
    return "1 day ago" if days == 1 else f"{days} days ago"


def format_relative_future(timestamp: datetime, now: Optional[datetime] = None) -> str:
    seconds = (timestamp - (now or utc_now())).total_seconds()
    if seconds < 60:
        return "momentarily"
    if seconds < 3600:
        minutes = _round_at_least_one(seconds / 60)
        return "in 1 minute" if minutes == 1 else f"in {minutes} minutes"
    if seconds < 86400:
        hours = _round_at_least_one(seconds / 3600)
        return "in 1 hour" if hours == 1 else f"in {hours} hours"
    days = _round_at_least_one(seconds / 86400)
    return "tomorrow" if days == 1 else f"in {days} days"


def is_reminder_overdue(reminder: PetReminder, now: Optional[datetime] = None) -> bool:
    """已设置提醒时间且已到期。"""
    return reminder.remind_at is not None and reminder.remind_at <= (now or utc_now())


def reminder_status(reminder: PetReminder, now: Optional[datetime] = None) -> str:
    """提醒状态文案：随时 / 现在 / 已逾期 / 即将到期。"""
    if reminder.remind_at is None:
        return "Ready when you are"
    now = now or utc_now()
    if reminder.remind_at <= now:
        overdue = now - reminder.remind_at
        return "Due now" if overdue < timedelta(minutes=1) else f"Overdue by {format_duration(overdue)}"
    until_due = reminder.remind_at - now
    return "Due now" if until_due < timedelta(minutes=1) else f"Due in {format_duration(until_due)}"


def activity_icon(activity: PetActivity) -> str:
    """按活动名称（名称为空时用备注）的关键字选图标。"""
    text = (activity.display_name or "").strip()
    if not text and activity.notes and activity.notes.strip():
        text = activity.notes
    text = text.lower()
    for keywords, icon in _ACTIVITY_ICONS:
        if any(k in text for k in keywords):
            return icon
    return _DEFAULT_ICON

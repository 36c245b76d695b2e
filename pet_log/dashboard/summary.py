"""首页概览：宠物数、今日活动、待办提醒、最近喂食与下次遛狗。"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from pet_log.config import RECENT_ACTIVITY_LIMIT
from pet_log.dashboard.status import format_relative_future, format_relative_past
from pet_log.store.models import PetActivity, PetReminder, utc_now
from pet_log.store.service import PetLogService

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DashboardSummary(BaseModel):
    """首页统计与文案。"""
    total_pets: int = Field(0, description="宠物总数")
    activities_logged_today: int = Field(0, description="今日记录的活动数")
    pending_reminders: int = Field(0, description="未到期或随时可做的提醒数")
    last_feeding_summary: str = Field("No feedings logged yet.", description="最近一次喂食")
    next_walk_summary: str = Field("No walks scheduled.", description="下次遛狗")


def _mentions(text: Optional[str], keyword: str) -> bool:
    return bool(text) and keyword in text.lower()


def is_feeding_activity(activity: PetActivity) -> bool:
    return _mentions(activity.display_name, "feed") or _mentions(activity.notes, "feed")


def is_walk_reminder(reminder: PetReminder) -> bool:
    return _mentions(reminder.display_name, "walk") or _mentions(reminder.notes, "walk")


def _reminder_sort_key(reminder: PetReminder):
    # 未设置时间的排在最后
    return (reminder.remind_at is None, reminder.remind_at or _EPOCH)


def recent_activities(service: PetLogService, limit: int = RECENT_ACTIVITY_LIMIT) -> List[PetActivity]:
    """按发生时间倒序的最近活动。"""
    return sorted(list(service.activities), key=lambda a: a.occurred_at, reverse=True)[:limit]


def upcoming_reminders(service: PetLogService) -> List[PetReminder]:
    """按提醒时间升序；未设置时间的排在最后。"""
    return sorted(list(service.reminders), key=_reminder_sort_key)


def _pet_name(service: PetLogService, pet_id: str) -> str:
    pet = service.get_pet(pet_id)
    return pet.display_name if pet is not None else "your pet"


def last_feeding_summary(service: PetLogService, now: Optional[datetime] = None) -> str:
    feedings = [a for a in list(service.activities) if is_feeding_activity(a)]
    if not feedings:
        return "No feedings logged yet."
    last = max(feedings, key=lambda a: a.occurred_at)
    return f"{_pet_name(service, last.pet_id)} was fed {format_relative_past(last.occurred_at, now)}."


def next_walk_summary(service: PetLogService, now: Optional[datetime] = None) -> str:
    walks = [r for r in list(service.reminders) if is_walk_reminder(r)]
    if not walks:
        return "No walks scheduled."
    nxt = min(walks, key=_reminder_sort_key)
    pet_name = _pet_name(service, nxt.pet_id)
    if nxt.remind_at is None:
        return f"Walk {pet_name} when you're ready."
    now = now or utc_now()
    if nxt.remind_at <= now:
        descriptor = f"was due {format_relative_past(nxt.remind_at, now)}"
    else:
        descriptor = f"scheduled {format_relative_future(nxt.remind_at, now)}"
    return f"Next walk for {pet_name} is {descriptor}."


def _local_now() -> datetime:
    return datetime.now().astimezone()


def build_summary(service: PetLogService, now: Optional[datetime] = None) -> DashboardSummary:
    """「今日」按本地日期计算。"""
    now = now or _local_now()
    today = now.date()
    activities = list(service.activities)
    reminders = list(service.reminders)
    return DashboardSummary(
        total_pets=len(service.pets),
        activities_logged_today=sum(
            1 for a in activities if a.occurred_at.astimezone(now.tzinfo).date() == today
        ),
        pending_reminders=sum(1 for r in reminders if r.remind_at is None or r.remind_at >= now),
        last_feeding_summary=last_feeding_summary(service, now),
        next_walk_summary=next_walk_summary(service, now),
    )

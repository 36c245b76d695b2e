"""首页概览与提醒状态测试。"""
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from pet_log.dashboard.status import (
    activity_icon,
    format_duration,
    format_relative_future,
    format_relative_past,
    is_reminder_overdue,
    reminder_status,
)
from pet_log.dashboard.summary import build_summary, recent_activities, upcoming_reminders
from pet_log.store.models import Pet, PetActivity, PetReminder
from pet_log.store.service import PetLogService

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service():
    with tempfile.TemporaryDirectory() as tmp:
        yield PetLogService(data_dir=Path(tmp))


def test_format_duration() -> None:
    assert format_duration(timedelta(seconds=30)) == "moments"
    assert format_duration(timedelta(minutes=1)) == "1 minute"
    assert format_duration(timedelta(minutes=45)) == "45 minutes"
    assert format_duration(timedelta(hours=1)) == "1 hour"
    assert format_duration(timedelta(hours=5)) == "5 hours"
    assert format_duration(timedelta(days=1)) == "1 day"
    assert format_duration(timedelta(days=3)) == "3 days"


def test_relative_wording() -> None:
    assert format_relative_past(NOW - timedelta(seconds=10), NOW) == "just now"
    assert format_relative_past(NOW - timedelta(minutes=5), NOW) == "5 minutes ago"
    assert format_relative_past(NOW - timedelta(hours=1), NOW) == "1 hour ago"
    assert format_relative_past(NOW - timedelta(days=2), NOW) == "2 days ago"
    assert format_relative_future(NOW + timedelta(seconds=10), NOW) == "momentarily"
    assert format_relative_future(NOW + timedelta(minutes=1), NOW) == "in 1 minute"
    assert format_relative_future(NOW + timedelta(hours=3), NOW) == "in 3 hours"
    assert format_relative_future(NOW + timedelta(days=1), NOW) == "tomorrow"
    assert format_relative_future(NOW + timedelta(days=4), NOW) == "in 4 days"


def test_reminder_status() -> None:
    assert reminder_status(PetReminder(pet_id="p", display_name="Walk"), NOW) == "Ready when you are"
    assert reminder_status(PetReminder(pet_id="p", remind_at=NOW), NOW) == "Due now"
    assert reminder_status(PetReminder(pet_id="p", remind_at=NOW + timedelta(seconds=20)), NOW) == "Due now"
    assert reminder_status(PetReminder(pet_id="p", remind_at=NOW - timedelta(hours=2)), NOW) == "Overdue by 2 hours"
    assert reminder_status(PetReminder(pet_id="p", remind_at=NOW + timedelta(minutes=30)), NOW) == "Due in 30 minutes"


def test_is_reminder_overdue() -> None:
    assert is_reminder_overdue(PetReminder(pet_id="p"), NOW) is False
    assert is_reminder_overdue(PetReminder(pet_id="p", remind_at=NOW), NOW) is True
    assert is_reminder_overdue(PetReminder(pet_id="p", remind_at=NOW + timedelta(minutes=1)), NOW) is False


def test_activity_icon() -> None:
    assert activity_icon(PetActivity(pet_id="p", display_name="Morning Feeding")) == "🍽️"
    assert activity_icon(PetActivity(pet_id="p", display_name="Evening stroll")) == "🚶"
    assert activity_icon(PetActivity(pet_id="p", display_name="Heartworm MEDS")) == "💊"
    assert activity_icon(PetActivity(pet_id="p", display_name="  ", notes="walk round the block")) == "🚶"
    assert activity_icon(PetActivity(pet_id="p", display_name="Bath")) == "🐾"


def test_empty_summary(service: PetLogService) -> None:
    summary = build_summary(service, NOW)
    assert summary.total_pets == 0
    assert summary.activities_logged_today == 0
    assert summary.pending_reminders == 0
    assert summary.last_feeding_summary == "No feedings logged yet."
    assert summary.next_walk_summary == "No walks scheduled."


def test_summary(service: PetLogService) -> None:
    luna = service.create_pet(Pet(display_name="Luna"))
    service.create_pet(Pet(display_name="Milo"))
    service.create_activity(PetActivity(pet_id=luna.id, display_name="Feeding", occurred_at=NOW - timedelta(hours=3)))
    service.create_activity(PetActivity(pet_id=luna.id, display_name="Walk", occurred_at=NOW - timedelta(days=2)))
    service.create_reminder(PetReminder(pet_id=luna.id, display_name="Walk", remind_at=NOW + timedelta(hours=2)))
    service.create_reminder(PetReminder(pet_id=luna.id, display_name="Meds", remind_at=NOW - timedelta(hours=1)))
    service.create_reminder(PetReminder(pet_id=luna.id, display_name="Brush"))

    summary = build_summary(service, NOW)
    assert summary.total_pets == 2
    assert summary.activities_logged_today == 1
    assert summary.pending_reminders == 2
    assert summary.last_feeding_summary == "Luna was fed 3 hours ago."
    assert summary.next_walk_summary == "Next walk for Luna is scheduled in 2 hours."


def test_walk_summary_variants(service: PetLogService) -> None:
    luna = service.create_pet(Pet(display_name="Luna"))
    walk = service.create_reminder(PetReminder(pet_id=luna.id, display_name="Walk"))
    assert build_summary(service, NOW).next_walk_summary == "Walk Luna when you're ready."
    walk.remind_at = NOW - timedelta(minutes=10)
    service.update_reminder(walk)
    assert build_summary(service, NOW).next_walk_summary == "Next walk for Luna is was due 10 minutes ago."


def test_ordering(service: PetLogService) -> None:
    luna = service.create_pet(Pet(display_name="Luna"))
    old = service.create_activity(PetActivity(pet_id=luna.id, display_name="A", occurred_at=NOW - timedelta(days=1)))
    new = service.create_activity(PetActivity(pet_id=luna.id, display_name="B", occurred_at=NOW))
    assert recent_activities(service) == [new, old]
    assert recent_activities(service, limit=1) == [new]

    anytime = service.create_reminder(PetReminder(pet_id=luna.id, display_name="Brush"))
    later = service.create_reminder(PetReminder(pet_id=luna.id, display_name="Walk", remind_at=NOW + timedelta(hours=5)))
    soon = service.create_reminder(PetReminder(pet_id=luna.id, display_name="Meds", remind_at=NOW + timedelta(hours=1)))
    assert upcoming_reminders(service) == [soon, later, anytime]


def test_today_uses_local_day_by_default(service: PetLogService, monkeypatch: pytest.MonkeyPatch) -> None:
    pacific = timezone(timedelta(hours=-8))
    local_evening = datetime(2025, 6, 1, 20, 0, tzinfo=pacific)
    monkeypatch.setattr("pet_log.dashboard.summary._local_now", lambda: local_evening)
    luna = service.create_pet(Pet(display_name="Luna"))
    service.create_activity(
        PetActivity(pet_id=luna.id, display_name="Walk", occurred_at=datetime(2025, 6, 1, 10, 0, tzinfo=pacific))
    )
    assert build_summary(service).activities_logged_today == 1
    utc_view = build_summary(service, local_evening.astimezone(timezone.utc))
    assert utc_view.activities_logged_today == 0

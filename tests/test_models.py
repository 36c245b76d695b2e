"""数据模型测试。"""
from datetime import datetime, timezone

from pet_log.store.models import Pet, PetActivity, PetLogSnapshot, RecurrenceFrequency, RecurrenceInfo


def test_recurrence_interval_is_clamped() -> None:
    assert RecurrenceInfo(interval=0).interval == 1
    assert RecurrenceInfo(interval=-3).interval == 1
    recurrence = RecurrenceInfo(frequency=RecurrenceFrequency.MONTHLY, interval=3)
    assert recurrence.interval == 3
    recurrence.interval = 0
    assert recurrence.interval == 1


def test_recurrence_frequency_serialized_as_integer() -> None:
    recurrence = RecurrenceInfo(frequency=RecurrenceFrequency.YEARLY)
    assert recurrence.model_dump(by_alias=True, exclude_none=True) == {"frequency": 4, "interval": 1}


def test_camel_case_aliases_and_snake_case_input() -> None:
    from_json = PetActivity.model_validate({"petId": "p1", "displayName": "Walk"})
    by_name = PetActivity(pet_id="p1", display_name="Walk")
    assert from_json.pet_id == by_name.pet_id == "p1"
    dumped = by_name.model_dump(by_alias=True, exclude_none=True)
    assert "petId" in dumped and "displayName" in dumped and "occurredAt" in dumped
    assert "recurrence" not in dumped


def test_pet_defaults() -> None:
    pet = Pet(display_name="Luna")
    assert pet.id == ""
    assert pet.notes is None
    assert pet.updated_at is None
    assert pet.archived_at is None
    assert pet.created_at.tzinfo is not None


def test_snapshot_accepts_missing_collections() -> None:
    snapshot = PetLogSnapshot.model_validate({"pets": [{"id": "a", "displayName": "Luna"}]})
    assert [p.id for p in snapshot.pets] == ["a"]
    assert snapshot.activities == []
    assert snapshot.reminders == []


def test_offset_timestamps_parse() -> None:
    pet = Pet.model_validate({"id": "a", "createdAt": "2024-05-01T10:00:00+02:00"})
    assert pet.created_at == datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_naive_timestamps_are_treated_as_utc() -> None:
    activity = PetActivity(pet_id="p1", occurred_at=datetime(2024, 1, 1, 8))
    assert activity.occurred_at == datetime(2024, 1, 1, 8, tzinfo=timezone.utc)
    activity.occurred_at = datetime(2024, 1, 2, 9)
    assert activity.occurred_at.tzinfo is not None
    recurrence = RecurrenceInfo(next_occurrence=datetime(2030, 1, 1), end_date=datetime(2031, 1, 1))
    assert recurrence.next_occurrence.tzinfo is not None
    assert recurrence.end_date.tzinfo is not None
    pet = Pet.model_validate({"id": "a", "createdAt": "2024-01-02T08:00:00"})
    assert pet.created_at == datetime(2024, 1, 2, 8, tzinfo=timezone.utc)

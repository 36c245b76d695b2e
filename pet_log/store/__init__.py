"""宠物、活动与提醒的 JSON 存储。"""
from pet_log.store.errors import DuplicateIdError, NotFoundError, OperationCancelled, PetLogError, SnapshotError
from pet_log.store.events import ChangeAction, ChangeEvent, EntityKind
from pet_log.store.models import (
    Pet,
    PetActivity,
    PetLogSnapshot,
    PetReminder,
    RecurrenceFrequency,
    RecurrenceInfo,
)
from pet_log.store.service import PetLogService

__all__ = [
    "Pet",
    "PetActivity",
    "PetReminder",
    "PetLogSnapshot",
    "RecurrenceFrequency",
    "RecurrenceInfo",
    "PetLogService",
    "ChangeAction",
    "ChangeEvent",
    "EntityKind",
    "PetLogError",
    "NotFoundError",
    "DuplicateIdError",
    "SnapshotError",
    "OperationCancelled",
]

"""宠物日志存储：宠物、活动、提醒三个集合，整体快照写入单个 JSON 文件。

所有写操作（含 load/save）串行经过同一把锁，每次变更后立即整体落盘；
get_* 查询不加锁，直接读内存中的当前状态。
"""
import contextlib
import json
import logging
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, ValuesView

from pydantic import ValidationError

from pet_log.config import PETLOG_DATA_DIR, PETLOG_FILENAME, ensure_dirs
from pet_log.store.errors import DuplicateIdError, NotFoundError, OperationCancelled, PetLogError, SnapshotError
from pet_log.store.events import ChangeAction, ChangeEvent, ChangeNotifier, EntityKind, Subscriber
from pet_log.store.models import Pet, PetActivity, PetLogSnapshot, PetReminder, RecurrenceInfo, utc_now

logger = logging.getLogger(__name__)

# 等锁时检查取消信号的间隔（秒）
_CANCEL_POLL_SECONDS = 0.05


def _raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled("Operation was cancelled.")


def _copy_recurrence(recurrence: Optional[RecurrenceInfo]) -> Optional[RecurrenceInfo]:
    return recurrence.model_copy(deep=True) if recurrence is not None else None


class PetLogService:
    """宠物日志仓库（单文件 JSON，进程内唯一写者）。"""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        filename: str = PETLOG_FILENAME,
        auto_load: bool = True,
    ):
        if data_dir is None:
            ensure_dirs()
        self.data_dir = data_dir or PETLOG_DATA_DIR
        self.filename = filename
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._pets: Dict[str, Pet] = {}
        self._activities: Dict[str, PetActivity] = {}
        self._reminders: Dict[str, PetReminder] = {}
        self._notifier = ChangeNotifier()

        if auto_load:
            try:
                self.load()
            except PetLogError:
                # 首次加载失败不影响启动：保持空数据
                logger.exception("Failed to load pet log data from %s", self.path)

    @property
    def path(self) -> Path:
        return self.data_dir / self.filename

    # 只读实时视图，供界面绑定
    @property
    def pets(self) -> ValuesView[Pet]:
        return self._pets.values()

    @property
    def activities(self) -> ValuesView[PetActivity]:
        return self._activities.values()

    @property
    def reminders(self) -> ValuesView[PetReminder]:
        return self._reminders.values()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """订阅变更事件；返回取消订阅函数。"""
        return self._notifier.subscribe(callback)

    # ---- 锁与落盘 ----

    def _acquire(self, cancel_event: Optional[threading.Event]) -> None:
        _raise_if_cancelled(cancel_event)
        if cancel_event is None:
            self._lock.acquire()
            return
        while not self._lock.acquire(timeout=_CANCEL_POLL_SECONDS):
            _raise_if_cancelled(cancel_event)
        if cancel_event.is_set():
            self._lock.release()
            raise OperationCancelled("Operation was cancelled.")

    @contextmanager
    def _mutation(self, cancel_event: Optional[threading.Event]) -> Iterator[List[ChangeEvent]]:
        """独占锁内执行；成功后在锁外发布收集到的事件。"""
        events: List[ChangeEvent] = []
        self._acquire(cancel_event)
        try:
            yield events
        finally:
            self._lock.release()
        self._notifier.publish(events)

    def _write_snapshot(self, cancel_event: Optional[threading.Event]) -> None:
        snapshot = PetLogSnapshot(
            pets=[p.model_copy(deep=True) for p in self._pets.values()],
            activities=[a.model_copy(deep=True) for a in self._activities.values()],
            reminders=[r.model_copy(deep=True) for r in self._reminders.values()],
        )
        payload = snapshot.model_dump_json(by_alias=True, exclude_none=True, indent=2)
        _raise_if_cancelled(cancel_event)

        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        # 先写临时文件再替换，中途崩溃不会留下半个文件
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        logger.debug(
            "Saved pet log (%d pets, %d activities, %d reminders) to %s",
            len(snapshot.pets), len(snapshot.activities), len(snapshot.reminders), path,
        )

    @staticmethod
    def _assign_identity(entity, collection: Dict[str, object], kind: EntityKind) -> None:
        if not entity.id:
            entity.id = str(uuid.uuid4())
        elif entity.id in collection:
            raise DuplicateIdError(kind.value, entity.id)
        now = utc_now()
        entity.created_at = now
        entity.updated_at = now

    def _require_pet(self, pet_id: str) -> None:
        if pet_id not in self._pets:
            raise NotFoundError(EntityKind.PET.value, pet_id)

    # ---- 整体加载 / 保存 ----

    def load(self, cancel_event: Optional[threading.Event] = None) -> None:
        """从文件整体替换内存数据；文件不存在时保持当前状态。"""
        with self._mutation(cancel_event) as events:
            path = self.path
            if not path.exists():
                return
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                _raise_if_cancelled(cancel_event)
                if data is None:
                    return
                snapshot = PetLogSnapshot.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                raise SnapshotError(f"Failed to load pet log data from {path}: {e}") from e

            for kind, items in (
                (EntityKind.PET, snapshot.pets),
                (EntityKind.ACTIVITY, snapshot.activities),
                (EntityKind.REMINDER, snapshot.reminders),
            ):
                missing = [item for item in items if not item.id]
                for item in missing:
                    item.id = str(uuid.uuid4())
                if missing:
                    logger.warning("Assigned new ids to %d %s entries without one in %s", len(missing), kind.value, path)

            self._pets.clear()
            self._pets.update((p.id, p) for p in snapshot.pets)
            self._activities.clear()
            self._activities.update((a.id, a) for a in snapshot.activities)
            self._reminders.clear()
            self._reminders.update((r.id, r) for r in snapshot.reminders)
            events.append(ChangeEvent(kind=EntityKind.SNAPSHOT, action=ChangeAction.LOADED))

    def save(self, cancel_event: Optional[threading.Event] = None) -> None:
        """把当前三个集合整体写入文件。"""
        with self._mutation(cancel_event):
            self._write_snapshot(cancel_event)

    # ---- 宠物 ----

    def create_pet(self, pet: Pet, cancel_event: Optional[threading.Event] = None) -> Pet:
        with self._mutation(cancel_event) as events:
            self._assign_identity(pet, self._pets, EntityKind.PET)
            self._pets[pet.id] = pet
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.PET, action=ChangeAction.CREATED, entity_id=pet.id))
            return pet

    def get_pet(self, pet_id: str) -> Optional[Pet]:
        return self._pets.get(pet_id)

    def update_pet(self, pet: Pet, cancel_event: Optional[threading.Event] = None) -> Pet:
        """更新名称、备注与归档时间。宠物不存在时抛 NotFoundError。"""
        with self._mutation(cancel_event) as events:
            existing = self._pets.get(pet.id)
            if existing is None:
                raise NotFoundError(EntityKind.PET.value, pet.id)
            existing.display_name = pet.display_name
            existing.notes = pet.notes
            existing.archived_at = pet.archived_at
            existing.updated_at = utc_now()
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.PET, action=ChangeAction.UPDATED, entity_id=existing.id))
            return existing

    def delete_pet(self, pet_id: str, cancel_event: Optional[threading.Event] = None) -> bool:
        """删除宠物并级联删除其活动与提醒。不存在时返回 False。"""
        with self._mutation(cancel_event) as events:
            if pet_id not in self._pets:
                return False
            activity_ids = [a.id for a in self._activities.values() if a.pet_id == pet_id]
            for activity_id in activity_ids:
                del self._activities[activity_id]
            reminder_ids = [r.id for r in self._reminders.values() if r.pet_id == pet_id]
            for reminder_id in reminder_ids:
                del self._reminders[reminder_id]
            del self._pets[pet_id]
            logger.info(
                "Deleted pet %s with %d activities and %d reminders",
                pet_id, len(activity_ids), len(reminder_ids),
            )
            self._write_snapshot(cancel_event)
            events.extend(
                ChangeEvent(kind=EntityKind.ACTIVITY, action=ChangeAction.DELETED, entity_id=i) for i in activity_ids
            )
            events.extend(
                ChangeEvent(kind=EntityKind.REMINDER, action=ChangeAction.DELETED, entity_id=i) for i in reminder_ids
            )
            events.append(ChangeEvent(kind=EntityKind.PET, action=ChangeAction.DELETED, entity_id=pet_id))
            return True

    # ---- 活动 ----

    def create_activity(self, activity: PetActivity, cancel_event: Optional[threading.Event] = None) -> PetActivity:
        with self._mutation(cancel_event) as events:
            self._require_pet(activity.pet_id)
            self._assign_identity(activity, self._activities, EntityKind.ACTIVITY)
            self._activities[activity.id] = activity
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.ACTIVITY, action=ChangeAction.CREATED, entity_id=activity.id))
            return activity

    def get_activity(self, activity_id: str) -> Optional[PetActivity]:
        return self._activities.get(activity_id)

    def list_activities_for_pet(self, pet_id: str) -> List[PetActivity]:
        return [a for a in list(self._activities.values()) if a.pet_id == pet_id]

    def update_activity(self, activity: PetActivity, cancel_event: Optional[threading.Event] = None) -> PetActivity:
        with self._mutation(cancel_event) as events:
            existing = self._activities.get(activity.id)
            if existing is None:
                raise NotFoundError(EntityKind.ACTIVITY.value, activity.id)
            self._require_pet(activity.pet_id)
            existing.pet_id = activity.pet_id
            existing.display_name = activity.display_name
            existing.notes = activity.notes
            existing.occurred_at = activity.occurred_at
            existing.recurrence = _copy_recurrence(activity.recurrence)
            existing.updated_at = utc_now()
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.ACTIVITY, action=ChangeAction.UPDATED, entity_id=existing.id))
            return existing

    def delete_activity(self, activity_id: str, cancel_event: Optional[threading.Event] = None) -> bool:
        with self._mutation(cancel_event) as events:
            if self._activities.pop(activity_id, None) is None:
                return False
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.ACTIVITY, action=ChangeAction.DELETED, entity_id=activity_id))
            return True

    # ---- 提醒 ----

    def create_reminder(self, reminder: PetReminder, cancel_event: Optional[threading.Event] = None) -> PetReminder:
        with self._mutation(cancel_event) as events:
            self._require_pet(reminder.pet_id)
            self._assign_identity(reminder, self._reminders, EntityKind.REMINDER)
            self._reminders[reminder.id] = reminder
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.REMINDER, action=ChangeAction.CREATED, entity_id=reminder.id))
            return reminder

    def get_reminder(self, reminder_id: str) -> Optional[PetReminder]:
        return self._reminders.get(reminder_id)

    def list_reminders_for_pet(self, pet_id: str) -> List[PetReminder]:
        return [r for r in list(self._reminders.values()) if r.pet_id == pet_id]

    def update_reminder(self, reminder: PetReminder, cancel_event: Optional[threading.Event] = None) -> PetReminder:
        with self._mutation(cancel_event) as events:
            existing = self._reminders.get(reminder.id)
            if existing is None:
                raise NotFoundError(EntityKind.REMINDER.value, reminder.id)
            self._require_pet(reminder.pet_id)
            existing.pet_id = reminder.pet_id
            existing.display_name = reminder.display_name
            existing.notes = reminder.notes
            existing.remind_at = reminder.remind_at
            existing.recurrence = _copy_recurrence(reminder.recurrence)
            existing.updated_at = utc_now()
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.REMINDER, action=ChangeAction.UPDATED, entity_id=existing.id))
            return existing

    def delete_reminder(self, reminder_id: str, cancel_event: Optional[threading.Event] = None) -> bool:
        with self._mutation(cancel_event) as events:
            if self._reminders.pop(reminder_id, None) is None:
                return False
            self._write_snapshot(cancel_event)
            events.append(ChangeEvent(kind=EntityKind.REMINDER, action=ChangeAction.DELETED, entity_id=reminder_id))
            return True

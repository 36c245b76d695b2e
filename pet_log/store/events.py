"""变更通知：界面层可订阅存储的增删改事件。"""
import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    PET = "pet"
    ACTIVITY = "activity"
    REMINDER = "reminder"
    SNAPSHOT = "snapshot"  # load() 整体替换


class ChangeAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    LOADED = "loaded"


class ChangeEvent(BaseModel):
    """一次已落盘的变更。"""
    kind: EntityKind = Field(..., description="实体类型")
    action: ChangeAction = Field(..., description="变更动作")
    entity_id: Optional[str] = Field(None, description="实体 ID；整体加载时为空")

    model_config = ConfigDict(frozen=True)


Subscriber = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """订阅者列表。回调出错只记日志，不影响存储和其他订阅者。"""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """注册回调，返回取消订阅函数。"""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, events: List[ChangeEvent]) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for event in events:
            for callback in subscribers:
                try:
                    callback(event)
                except Exception:
                    logger.exception("Change subscriber failed for %s %s", event.kind.value, event.action.value)

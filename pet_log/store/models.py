"""宠物、活动记录、提醒与重复规则数据模型。"""
from datetime import datetime, timezone
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    """JSON 字段为 camelCase；读取时 snake_case 也接受。"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def naive_datetime_as_utc(cls, v):
        # 不带时区的时间一律按 UTC 处理，落盘总带偏移
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class RecurrenceFrequency(IntEnum):
    """重复频率（落盘为整数）。"""
    NONE = 0
    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3
    YEARLY = 4


class RecurrenceInfo(_CamelModel):
    """活动/提醒的重复规则。"""
    frequency: RecurrenceFrequency = Field(RecurrenceFrequency.NONE, description="重复频率")
    interval: int = Field(1, description="间隔（至少为 1）")
    next_occurrence: Optional[datetime] = Field(None, description="下次发生时间")
    end_date: Optional[datetime] = Field(None, description="结束日期")

    @field_validator("interval")
    @classmethod
    def clamp_interval(cls, v: int) -> int:
        return v if v >= 1 else 1


class Pet(_CamelModel):
    """宠物（聚合根）。archived_at 只是归档标记，不会删除或级联。"""
    id: str = Field("", description="宠物唯一 ID；为空时由存储分配")
    display_name: str = Field("", description="显示名称")
    notes: Optional[str] = Field(None, description="备注")
    created_at: datetime = Field(default_factory=utc_now, description="创建时间")
    updated_at: Optional[datetime] = Field(None, description="更新时间")
    archived_at: Optional[datetime] = Field(None, description="归档时间")


class PetActivity(_CamelModel):
    """一条活动记录：喂食、遛狗、吃药等。"""
    id: str = Field("", description="活动唯一 ID；为空时由存储分配")
    pet_id: str = Field(..., description="所属宠物 ID")
    display_name: str = Field("", description="显示名称")
    notes: Optional[str] = Field(None, description="备注")
    occurred_at: datetime = Field(default_factory=utc_now, description="发生时间")
    recurrence: Optional[RecurrenceInfo] = Field(None, description="重复规则")
    created_at: datetime = Field(default_factory=utc_now, description="创建时间")
    updated_at: Optional[datetime] = Field(None, description="更新时间")


class PetReminder(_CamelModel):
    """一条提醒；remind_at 为空表示「随时可做」。"""
    id: str = Field("", description="提醒唯一 ID；为空时由存储分配")
    pet_id: str = Field(..., description="所属宠物 ID")
    display_name: str = Field("", description="显示名称")
    notes: Optional[str] = Field(None, description="备注")
    remind_at: Optional[datetime] = Field(None, description="提醒时间")
    recurrence: Optional[RecurrenceInfo] = Field(None, description="重复规则")
    created_at: datetime = Field(default_factory=utc_now, description="创建时间")
    updated_at: Optional[datetime] = Field(None, description="更新时间")


class PetLogSnapshot(_CamelModel):
    """整个数据文件：三个集合的完整快照。"""
    pets: List[Pet] = Field(default_factory=list)
    activities: List[PetActivity] = Field(default_factory=list)
    reminders: List[PetReminder] = Field(default_factory=list)

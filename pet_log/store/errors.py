"""存储层异常。"""


class PetLogError(Exception):
    """宠物日志存储异常基类。"""


class NotFoundError(PetLogError, KeyError):
    """引用的实体（自身或所属宠物）不存在。"""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"No {kind} found with identifier {entity_id}.")

    def __str__(self) -> str:
        # KeyError 默认会给消息加引号
        return self.args[0]


class DuplicateIdError(PetLogError, ValueError):
    """新建实体时指定的 ID 已存在。"""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"A {kind} with identifier {entity_id} already exists.")


class SnapshotError(PetLogError):
    """数据文件读取或解析失败。"""


class OperationCancelled(PetLogError):
    """调用方取消了操作。"""

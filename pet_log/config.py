"""宠物日志全局配置与路径。"""
from pathlib import Path

# 项目根目录（pet_log 包所在目录的上一级）
ROOT_DIR = Path(__file__).resolve().parent.parent
# 数据目录：应用私有数据
DATA_DIR = ROOT_DIR / "data"
PETLOG_DATA_DIR = DATA_DIR / "petlog"  # 宠物、活动、提醒快照

# 快照文件名（固定）
PETLOG_FILENAME = "petlog.json"

# 首页「最近活动」最多显示条数
RECENT_ACTIVITY_LIMIT = 20


def ensure_dirs() -> None:
    """确保数据目录存在。"""
    for d in (DATA_DIR, PETLOG_DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)

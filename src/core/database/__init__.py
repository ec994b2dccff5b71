"""
Covenant Bot - Database Module
==============================

JSON document store for warnings, marriages, pending requests and mutes.
"""

from src.core.database.manager import Store
from src.core.database.base import JsonDocument, _safe_json_loads
from src.core.database.models import (
    DivorceRecord,
    MarriageLink,
    MuteRecord,
    ProposalRecord,
    WarningEntry,
    WarningRecord,
)

__all__ = [
    "Store",
    "JsonDocument",
    "_safe_json_loads",
    "WarningEntry",
    "WarningRecord",
    "MarriageLink",
    "ProposalRecord",
    "DivorceRecord",
    "MuteRecord",
]

"""
Covenant Bot - Warning Document Operations
==========================================

Warning record operations on warnings.json.
"""

from typing import TYPE_CHECKING, Optional, Tuple

from src.core.logger import logger
from src.core.database.models import WarningEntry, WarningRecord

if TYPE_CHECKING:
    from src.core.database.base import JsonDocument


def _empty_record() -> WarningRecord:
    return {"count": 0, "warnings": [], "lastWarning": None}


class WarningsMixin:
    """Mixin for warning-related document operations."""

    warnings: "JsonDocument"

    def get_warning_record(self, user_id: int) -> WarningRecord:
        """
        Get a member's warning record, or an empty one.

        The empty record is not persisted; it only exists once a
        warning is appended.
        """
        record = self.warnings.get(str(user_id))
        return record if record is not None else _empty_record()

    def append_warning(
        self,
        user_id: int,
        moderator_id: int,
        reason: str,
        now_ms: int,
        issued_at: str,
    ) -> Tuple[WarningEntry, int]:
        """
        Append a warning and return it with the new count.

        Args:
            user_id: Member being warned.
            moderator_id: Moderator issuing the warning.
            reason: Non-empty reason text.
            now_ms: Current time in ms, used as the warning id.
            issued_at: ISO-8601 issue time.

        Returns:
            Tuple of (created warning, warning count after append).
        """
        with self.warnings.mutate() as data:
            record = data.setdefault(str(user_id), _empty_record())

            warning_id = now_ms
            existing_ids = {w["id"] for w in record["warnings"]}
            while warning_id in existing_ids:
                warning_id += 1

            entry: WarningEntry = {
                "id": warning_id,
                "reason": reason,
                "moderator": str(moderator_id),
                "timestamp": issued_at,
            }
            record["warnings"].append(entry)
            record["count"] = len(record["warnings"])
            record["lastWarning"] = issued_at
            count = record["count"]

        logger.tree("Warning Added", [
            ("User ID", str(user_id)),
            ("Moderator ID", str(moderator_id)),
            ("Warning ID", str(warning_id)),
            ("Count", str(count)),
            ("Reason", reason[:50]),
        ], emoji="⚠️")

        return dict(entry), count

    def remove_warning(self, user_id: int, warning_id: int) -> Optional[Tuple[WarningEntry, int]]:
        """
        Remove one warning by id.

        Returns:
            Tuple of (removed warning, remaining count), or None if the
            member has no warning with that id.
        """
        key = str(user_id)
        with self.warnings.mutate() as data:
            record = data.get(key)
            if not record:
                return None

            for index, warning in enumerate(record["warnings"]):
                if warning["id"] == warning_id:
                    removed = record["warnings"].pop(index)
                    record["count"] = len(record["warnings"])
                    return dict(removed), record["count"]

        return None

    def clear_warnings(self, user_id: int) -> int:
        """Delete a member's whole record. Returns how many warnings were cleared."""
        key = str(user_id)
        if key not in self.warnings:
            return 0

        with self.warnings.mutate() as data:
            record = data.pop(key, None)

        return len(record["warnings"]) if record else 0


__all__ = ["WarningsMixin"]

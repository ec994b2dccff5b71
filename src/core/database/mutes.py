"""
Covenant Bot - Mute Document Operations
=======================================

Active mute tracking on muted_members.json.
"""

from typing import TYPE_CHECKING, List, Optional, Tuple

from src.core.logger import logger
from src.core.database.models import MuteRecord

if TYPE_CHECKING:
    from src.core.database.base import JsonDocument


def _same_mute(a: MuteRecord, b: MuteRecord) -> bool:
    return a.get("mutedAt") == b.get("mutedAt") and a.get("unmuteTime") == b.get("unmuteTime")


class MutesMixin:
    """Mixin for mute-related document operations."""

    mutes: "JsonDocument"

    def add_mute(
        self,
        user_id: int,
        guild_id: int,
        moderator_id: int,
        reason: str,
        duration_minutes: int,
        now_ms: int,
    ) -> MuteRecord:
        """
        Record a mute, replacing any existing one for the member.

        Returns:
            The stored mute record.
        """
        record: MuteRecord = {
            "guildId": str(guild_id),
            "reason": reason,
            "duration": duration_minutes,
            "unmuteTime": now_ms + duration_minutes * 60 * 1000,
            "mutedBy": str(moderator_id),
            "mutedAt": now_ms,
        }
        with self.mutes.mutate() as data:
            data[str(user_id)] = record

        logger.tree("Mute Recorded", [
            ("User ID", str(user_id)),
            ("Duration", f"{duration_minutes}m"),
            ("Moderator ID", str(moderator_id)),
        ], emoji="🔇")

        return dict(record)

    def get_mute(self, user_id: int) -> Optional[MuteRecord]:
        """Get the active mute for a member, if any."""
        return self.mutes.get(str(user_id))

    def remove_mute(self, user_id: int) -> bool:
        """Delete a member's mute record. Returns True if one existed."""
        key = str(user_id)
        if key not in self.mutes:
            return False
        with self.mutes.mutate() as data:
            return data.pop(key, None) is not None

    def remove_mute_if(self, user_id: int, expected: MuteRecord) -> bool:
        """
        Delete a member's mute record only if it is still the given one.

        A mute recorded again after `expected` was read is left in place.
        Returns True if the record was deleted.
        """
        key = str(user_id)
        with self.mutes.mutate() as data:
            current = data.get(key)
            if current is None or not _same_mute(current, expected):
                return False
            del data[key]
            return True

    def is_current_mute(self, user_id: int, expected: MuteRecord) -> bool:
        """Check whether `expected` is still the member's stored mute."""
        current = self.mutes.get(str(user_id))
        return current is not None and _same_mute(current, expected)

    def get_expired_mutes(self, now_ms: int) -> List[Tuple[str, MuteRecord]]:
        """List (user_id, record) pairs whose unmute time has passed."""
        return [
            (user_id, record)
            for user_id, record in self.mutes.read().items()
            if now_ms >= record.get("unmuteTime", 0)
        ]

    def count_active_mutes(self) -> int:
        return len(self.mutes)


__all__ = ["MutesMixin"]

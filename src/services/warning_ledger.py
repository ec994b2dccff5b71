"""
Covenant Bot - Warning Ledger
=============================

Records warnings against members and triggers escalation.

DESIGN:
    The warning is persisted before anything talks to Discord. The DM
    and the escalation that follow are best-effort: their failure is
    reported in the WarnOutcome but never undoes the recorded warning.
"""

from dataclasses import dataclass
from typing import Optional, Union

import discord

from src.core.logger import logger
from src.core.config import EmbedColors
from src.core.database import Store, WarningEntry, WarningRecord
from src.core.errors import ValidationError, WarningNotFoundError
from src.services.escalation import EscalationAction, EscalationPolicy
from src.utils.dm_helpers import DeliveryResult, send_notice_dm
from src.utils.time_format import iso_from_ms, now_ms


UserLike = Union[discord.User, discord.Member]


@dataclass(frozen=True)
class WarnOutcome:
    """Result of issuing one warning."""

    warning: WarningEntry
    count: int
    notification: DeliveryResult
    action: EscalationAction
    action_applied: bool


class WarningLedger:
    """
    Per-member warning records.

    Attributes:
        store: Backing store.
        policy: Escalation policy run after each warning.
    """

    def __init__(self, store: Store, policy: EscalationPolicy) -> None:
        self.store = store
        self.policy = policy

    def get_or_create(self, user_id: int) -> WarningRecord:
        """Existing record or an empty one. Never writes."""
        return self.store.get_warning_record(user_id)

    async def add_warning(
        self,
        user: UserLike,
        moderator: UserLike,
        reason: str,
        guild: discord.Guild,
        now: Optional[int] = None,
    ) -> WarnOutcome:
        """
        Warn a member, notify them and run escalation.

        Args:
            user: Member being warned.
            moderator: Moderator issuing the warning.
            reason: Reason text, must not be blank.
            guild: Guild the warning belongs to.
            now: Override for the current time in ms.

        Returns:
            WarnOutcome with the created warning and what followed.

        Raises:
            ValidationError: If reason is blank.
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("❌ A warning needs a reason.")

        current = now if now is not None else now_ms()
        warning, count = self.store.append_warning(
            user_id=user.id,
            moderator_id=moderator.id,
            reason=reason,
            now_ms=current,
            issued_at=iso_from_ms(current),
        )

        notification = await send_notice_dm(
            user,
            title="⚠️ You've been warned",
            color=EmbedColors.WARNING,
            context="Warn DM",
            guild=guild,
            moderator=moderator,
            reason=reason,
            description=f"You received a warning in **{guild.name}**.",
            fields=[("Warning Count", str(count))],
        )

        member = user if isinstance(user, discord.Member) else guild.get_member(user.id)
        action, applied = await self.policy.apply(member, count, moderator.id)

        logger.tree("Member Warned", [
            ("User", f"{user} ({user.id})"),
            ("Moderator", str(moderator)),
            ("Count", str(count)),
            ("DM", "Delivered" if notification else f"Suppressed ({notification.reason})"),
            ("Escalation", action.value if applied or action is EscalationAction.NONE else f"{action.value} (failed)"),
        ], emoji="⚠️")

        return WarnOutcome(
            warning=warning,
            count=count,
            notification=notification,
            action=action,
            action_applied=applied,
        )

    async def delete_warning(
        self,
        user: UserLike,
        warning_id: int,
        moderator: UserLike,
        guild: discord.Guild,
    ) -> WarningEntry:
        """
        Revoke one warning.

        Raises:
            WarningNotFoundError: If the member has no warning with that id.
        """
        result = self.store.remove_warning(user.id, warning_id)
        if result is None:
            raise WarningNotFoundError()

        removed, remaining = result

        await send_notice_dm(
            user,
            title="✅ A warning was revoked",
            color=EmbedColors.RELEASE,
            context="Warn Revoked DM",
            guild=guild,
            moderator=moderator,
            description=f"One of your warnings in **{guild.name}** was revoked.",
            fields=[
                ("Revoked Reason", removed["reason"], False),
                ("Remaining Warnings", str(remaining)),
            ],
        )

        logger.tree("Warning Revoked", [
            ("User", f"{user} ({user.id})"),
            ("Warning ID", str(warning_id)),
            ("Remaining", str(remaining)),
            ("Moderator", str(moderator)),
        ], emoji="✅")

        return removed

    async def clear_all(
        self,
        user: UserLike,
        moderator: UserLike,
        guild: discord.Guild,
    ) -> int:
        """Delete every warning for a member. Returns how many were cleared."""
        cleared = self.store.clear_warnings(user.id)
        if cleared == 0:
            return 0

        await send_notice_dm(
            user,
            title="🎉 All warnings cleared",
            color=EmbedColors.CLEARED,
            context="Warns Cleared DM",
            guild=guild,
            moderator=moderator,
            description=f"All of your warnings in **{guild.name}** were cleared.",
            fields=[("Cleared", str(cleared))],
        )

        logger.tree("Warnings Cleared", [
            ("User", f"{user} ({user.id})"),
            ("Cleared", str(cleared)),
            ("Moderator", str(moderator)),
        ], emoji="🧹")

        return cleared


__all__ = ["WarnOutcome", "WarningLedger"]

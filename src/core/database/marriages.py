"""
Covenant Bot - Marriage Document Operations
===========================================

Symmetric marriage links on marriages.json.

DESIGN:
    A marriage is stored as two links, one under each spouse. Both
    sides are written and removed inside a single mutate() so the
    pair never exists half-written.
"""

from typing import TYPE_CHECKING, Optional

from src.core.logger import logger
from src.core.database.models import MarriageLink

if TYPE_CHECKING:
    from src.core.database.base import JsonDocument


class MarriagesMixin:
    """Mixin for marriage-related document operations."""

    marriages: "JsonDocument"

    def get_marriage(self, user_id: int) -> Optional[MarriageLink]:
        """Get a member's marriage link, if any."""
        return self.marriages.get(str(user_id))

    def is_married(self, user_id: int) -> bool:
        return str(user_id) in self.marriages

    def create_marriage(self, user_a: int, user_b: int, married_at: str) -> None:
        """
        Write both sides of a marriage.

        Args:
            user_a: First spouse.
            user_b: Second spouse.
            married_at: ISO-8601 marriage date shared by both links.
        """
        with self.marriages.mutate() as data:
            data[str(user_a)] = {"spouse": str(user_b), "marriageDate": married_at}
            data[str(user_b)] = {"spouse": str(user_a), "marriageDate": married_at}

        logger.tree("Marriage Created", [
            ("Spouse A", str(user_a)),
            ("Spouse B", str(user_b)),
        ], emoji="💍")

    def dissolve_marriage(self, user_a: int, user_b: int) -> bool:
        """Remove both sides of a marriage. Returns True if anything was removed."""
        with self.marriages.mutate() as data:
            removed_a = data.pop(str(user_a), None)
            removed_b = data.pop(str(user_b), None)

        removed = removed_a is not None or removed_b is not None
        if removed:
            logger.tree("Marriage Dissolved", [
                ("Spouse A", str(user_a)),
                ("Spouse B", str(user_b)),
            ], emoji="💔")
        return removed


__all__ = ["MarriagesMixin"]

"""
Covenant Bot - Utils Package
============================

Helper functions and utility classes.

DESIGN:
    Utils are stateless helpers that can be used anywhere in the
    codebase. They do not depend on bot state.

Available Utilities:
    Footer: Standardized embed footer
    DM Helpers: Best-effort direct message delivery
    Time Format: Millisecond clocks, ISO strings and Discord timestamps
"""

# =============================================================================
# Utility Imports
# =============================================================================

from .footer import FOOTER_TEXT, set_footer


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "FOOTER_TEXT",
    "set_footer",
]

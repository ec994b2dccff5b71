"""
Covenant Bot - Commands Package
===============================

Slash command implementations, one cog package per feature.

DESIGN:
    Each package exposes async setup(bot). The bot loads every entry of
    COMMAND_COGS with load_extension() during setup_hook.

Available Commands:
    /warn, /check_warn, /delete_warn, /clear_all_warn (admin)
    /mute, /unmute (admin)
    /kick, /ban (admin)
    /propose, /marriage, /divorce (public)
    /registration_stats (public)
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.warn",
    "src.commands.mute",
    "src.commands.ban",
    "src.commands.marriage",
    "src.commands.registration",
]
"""List of command cog module paths for dynamic loading."""


__all__ = [
    "COMMAND_COGS",
]

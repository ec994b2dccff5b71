"""
Covenant Bot - Source Package
=============================

Moderation and community bot for a single Discord guild: a warning
ledger with automatic escalation, timed mutes, a consent-based
marriage workflow and spreadsheet-backed member registration.

Package Structure:
- bot.py: Main Discord bot class and lifecycle
- commands/: Slash command cogs (warn, mute, ban, marriage, registration)
- core/: Configuration, logging, errors and the JSON document store
- services/: Domain workflows and background sweepers
- utils/: Helper functions and utilities
"""

"""
Covenant Bot - Core Package
===========================

Core components shared across the bot: configuration, logging,
the error taxonomy, the JSON document store and health monitoring.

DESIGN:
    Configuration and logging are process-wide singletons:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance

    The Store is owned by the bot and passed to services explicitly.
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    get_config,
    is_admin,
)

from .database import Store

from .logger import logger, TreeLogger

from .health import HealthCheckServer


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "get_config",
    "is_admin",
    # Database
    "Store",
    # Logger
    "logger",
    "TreeLogger",
    # Health
    "HealthCheckServer",
]

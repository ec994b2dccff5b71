"""
Covenant Bot - Configuration Module
===================================

Centralized configuration management with environment variable validation.

DESIGN:
    Single source of truth for all configuration, loaded from environment
    variables at startup. Using a dataclass keeps every setting typed and
    discoverable in one place.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission helpers centralize the admin-only vs public split
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict

from src.core.logger import LOCAL_TZ


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    DESIGN:
        Required fields raise ConfigValidationError if missing.
        Optional fields fall back to the documented defaults.
        All Discord IDs are integers to prevent string comparison bugs.

    Attributes:
        bot_token: Discord bot authentication token.
        application_id: Discord application (client) ID.
        guild_id: The single server this bot serves.
        admin_role_id: Role allowed to run moderation commands.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    bot_token: str
    application_id: int
    guild_id: int
    admin_role_id: int

    # -------------------------------------------------------------------------
    # Optional: Warning Escalation
    # -------------------------------------------------------------------------

    warn_mute_threshold: int = 3
    warn_kick_threshold: int = 5
    warn_ban_threshold: int = 7
    auto_mute_minutes: int = 24 * 60

    # -------------------------------------------------------------------------
    # Optional: Relationships
    # -------------------------------------------------------------------------

    unilateral_divorce: bool = False
    pending_request_ttl: int = 30 * 60      # Seconds before a proposal/divorce request lapses

    # -------------------------------------------------------------------------
    # Optional: Storage
    # -------------------------------------------------------------------------

    data_dir: Path = Path("data")

    # -------------------------------------------------------------------------
    # Optional: Scheduler Intervals (seconds)
    # -------------------------------------------------------------------------

    mute_check_interval: int = 60
    request_sweep_interval: int = 10 * 60

    # -------------------------------------------------------------------------
    # Optional: Registration Spreadsheet
    # -------------------------------------------------------------------------

    spreadsheet_id: Optional[str] = None
    spreadsheet_range: str = "Sheet1!A:G"
    registration_channel_id: Optional[int] = None
    report_channel_id: Optional[int] = None
    google_project_id: Optional[str] = None
    google_private_key_id: Optional[str] = None
    google_private_key: Optional[str] = None
    google_client_email: Optional[str] = None
    google_client_id: Optional[str] = None

    # -------------------------------------------------------------------------
    # Optional: Operations
    # -------------------------------------------------------------------------

    health_port: Optional[int] = None
    error_webhook_url: Optional[str] = None

    # -------------------------------------------------------------------------
    # Derived
    # -------------------------------------------------------------------------

    @property
    def registration_enabled(self) -> bool:
        """Registration needs a sheet, a channel and service-account credentials."""
        return bool(
            self.spreadsheet_id
            and self.registration_channel_id
            and self.google_client_email
            and self.google_private_key
        )

    def service_account_info(self) -> Dict[str, str]:
        """Build the service-account mapping expected by google-auth."""
        private_key = (self.google_private_key or "").replace("\\n", "\n")
        return {
            "type": "service_account",
            "project_id": self.google_project_id or "",
            "private_key_id": self.google_private_key_id or "",
            "private_key": private_key,
            "client_email": self.google_client_email or "",
            "client_id": self.google_client_id or "",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for Discord embeds."""

    WARNING = 0xFF6B6B      # Warning issued
    HISTORY = 0xFFA500      # Warning history
    KICK = 0xFF8C00
    BAN = 0xDC143C
    MUTE = 0x9932CC
    RELEASE = 0x32CD32      # Unmute / warning revoked
    CLEARED = 0x00FF00      # All warnings cleared
    PROPOSAL = 0xFF69B4
    MARRIED = 0xFFD700
    SINGLE = 0x808080
    DIVORCE = 0x8B4513
    REJECTED = 0xFF6B6B
    REGISTRATION = 0x3498DB


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range clamping.

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default
    from src.core.logger import logger
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse a truthy environment flag ("1", "true", "yes", "on")."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Validate webhook URL format, returning None if invalid."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    DESIGN:
        Validates all required variables upfront before creating the
        Config object (fail fast, no partial initialization).

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    required = ["BOT_TOKEN", "CLIENT_ID", "GUILD_ID", "ADMIN_ROLE_ID"]
    missing = [name for name in required if not os.getenv(name)]

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    mute_threshold = _parse_int_with_default(
        os.getenv("WARN_MUTE_THRESHOLD"), 3, "WARN_MUTE_THRESHOLD", min_val=1
    )
    kick_threshold = _parse_int_with_default(
        os.getenv("WARN_KICK_THRESHOLD"), 5, "WARN_KICK_THRESHOLD", min_val=1
    )
    ban_threshold = _parse_int_with_default(
        os.getenv("WARN_BAN_THRESHOLD"), 7, "WARN_BAN_THRESHOLD", min_val=1
    )
    if not mute_threshold <= kick_threshold <= ban_threshold:
        raise ConfigValidationError(
            "Warning thresholds must satisfy mute <= kick <= ban "
            f"(got {mute_threshold}/{kick_threshold}/{ban_threshold})"
        )

    return Config(
        bot_token=os.getenv("BOT_TOKEN"),
        application_id=_parse_int(os.getenv("CLIENT_ID"), "CLIENT_ID"),
        guild_id=_parse_int(os.getenv("GUILD_ID"), "GUILD_ID"),
        admin_role_id=_parse_int(os.getenv("ADMIN_ROLE_ID"), "ADMIN_ROLE_ID"),
        warn_mute_threshold=mute_threshold,
        warn_kick_threshold=kick_threshold,
        warn_ban_threshold=ban_threshold,
        auto_mute_minutes=_parse_int_with_default(
            os.getenv("AUTO_MUTE_MINUTES"), 24 * 60, "AUTO_MUTE_MINUTES", min_val=1, max_val=40320
        ),
        unilateral_divorce=_parse_bool(os.getenv("UNILATERAL_DIVORCE")),
        pending_request_ttl=_parse_int_with_default(
            os.getenv("PENDING_REQUEST_TTL"), 30 * 60, "PENDING_REQUEST_TTL", min_val=60
        ),
        data_dir=Path(os.getenv("DATA_DIR", "data")),
        mute_check_interval=_parse_int_with_default(
            os.getenv("MUTE_CHECK_INTERVAL"), 60, "MUTE_CHECK_INTERVAL", min_val=5, max_val=3600
        ),
        request_sweep_interval=_parse_int_with_default(
            os.getenv("REQUEST_SWEEP_INTERVAL"), 10 * 60, "REQUEST_SWEEP_INTERVAL", min_val=10, max_val=3600
        ),
        spreadsheet_id=os.getenv("SPREADSHEET_ID") or None,
        spreadsheet_range=os.getenv("SPREADSHEET_RANGE") or "Sheet1!A:G",
        registration_channel_id=_parse_int_optional(os.getenv("REGISTRATION_CHANNEL_ID")),
        report_channel_id=_parse_int_optional(os.getenv("REPORT_CHANNEL_ID")),
        google_project_id=os.getenv("GOOGLE_PROJECT_ID") or None,
        google_private_key_id=os.getenv("GOOGLE_PRIVATE_KEY_ID") or None,
        google_private_key=os.getenv("GOOGLE_PRIVATE_KEY") or None,
        google_client_email=os.getenv("GOOGLE_CLIENT_EMAIL") or None,
        google_client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
        health_port=_parse_int_optional(os.getenv("HEALTH_PORT")),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> None:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    features = []
    if config.registration_enabled:
        features.append("Registration")
    if config.health_port:
        features.append("Health Server")
    if config.error_webhook_url:
        features.append("Webhook Alerts")

    logger.tree("Configuration Validated", [
        ("Guild", str(config.guild_id)),
        ("Thresholds", f"mute {config.warn_mute_threshold} / kick {config.warn_kick_threshold} / ban {config.warn_ban_threshold}"),
        ("Divorce Policy", "unilateral" if config.unilateral_divorce else "mutual consent"),
        ("Data Dir", str(config.data_dir)),
        ("Optional Features", ", ".join(features) if features else "None"),
    ], emoji="⚙️")


# =============================================================================
# Permission Helpers
# =============================================================================

def is_admin(member, admin_role_id: Optional[int] = None) -> bool:
    """
    Check if a member may use moderation commands.

    Args:
        member: Discord member object to check.
        admin_role_id: Role to check, defaults to the configured admin role.

    Returns:
        True if member holds the admin role or the administrator permission.
    """
    if member is None:
        return False

    permissions = getattr(member, "guild_permissions", None)
    if permissions is not None and permissions.administrator:
        return True

    role_id = admin_role_id if admin_role_id is not None else get_config().admin_role_id
    return any(role.id == role_id for role in getattr(member, "roles", []))


async def check_admin_permission(interaction, admin_role_id: Optional[int] = None) -> bool:
    """
    Check admin permission and send an ephemeral error if not authorized.

    Returns:
        True if authorized, False if not (error already sent).
    """
    if not is_admin(interaction.user, admin_role_id):
        await interaction.response.send_message(
            "❌ You don't have permission to use this command.",
            ephemeral=True,
        )
        return False
    return True


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "LOCAL_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
    "is_admin",
    "check_admin_permission",
]

"""
Covenant Bot - Centralized Constants
====================================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Time Constants
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND

# =============================================================================
# Moderation Limits
# =============================================================================

MIN_MUTE_MINUTES = 1
MAX_MUTE_MINUTES = 40320              # 28 days, Discord's timeout ceiling
DEFAULT_REASON = "No reason provided"
WARN_HISTORY_LIMIT = 5                # Warnings shown by /check_warn

# =============================================================================
# Relationship Requests
# =============================================================================

PENDING_REQUEST_TTL = 30 * SECONDS_PER_MINUTE
"""Seconds a proposal or divorce request stays answerable."""

# =============================================================================
# Button Custom IDs
# =============================================================================

PROPOSAL_ACCEPT_PREFIX = "accept_"
PROPOSAL_REJECT_PREFIX = "reject_"
DIVORCE_ACCEPT_PREFIX = "divorce_accept_"
DIVORCE_REJECT_PREFIX = "divorce_reject_"

REQUEST_ID_PATTERN = r"\d+_\d+_\d+"
"""Composite request id: <initiatorId>_<counterpartId>_<msTimestamp>."""

# =============================================================================
# Storage
# =============================================================================

WARNINGS_FILE = "warnings.json"
MARRIAGES_FILE = "marriages.json"
PROPOSALS_FILE = "proposals.json"
DIVORCES_FILE = "divorces.json"
MUTES_FILE = "muted_members.json"

# =============================================================================
# Network
# =============================================================================

API_TIMEOUT = 10                      # External API request timeout (seconds)

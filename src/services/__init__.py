"""
Covenant Bot - Services Package
===============================

Domain workflows and background services.

DESIGN:
    Services hold the rules; cogs only translate interactions into
    service calls and results into replies. Each service takes the
    Store (and any outside client) through its constructor so tests
    can drive it without a gateway connection.

Available Services:
    EscalationPolicy: Warning-count thresholds to mute, kick or ban
    WarningLedger: Add, delete and clear warnings with DM notices
    RelationshipWorkflow: Proposal, marriage and divorce state machine
    MuteScheduler: Background release of expired mutes
    RequestSweeper: Background expiry of stale proposals and divorces
    RegistrationService: Registration parsing and spreadsheet ingestion
"""

# =============================================================================
# Service Imports
# =============================================================================

from .escalation import EscalationAction, EscalationPolicy, Thresholds
from .warning_ledger import WarningLedger, WarnOutcome
from .relationship import RelationshipWorkflow
from .mute_scheduler import MuteScheduler
from .request_sweeper import RequestSweeper
from .registration import RegistrationService, RegistrationSheet


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "EscalationAction",
    "EscalationPolicy",
    "Thresholds",
    "WarningLedger",
    "WarnOutcome",
    "RelationshipWorkflow",
    "MuteScheduler",
    "RequestSweeper",
    "RegistrationService",
    "RegistrationSheet",
]

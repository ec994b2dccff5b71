"""
Covenant Bot - Record Type Definitions
======================================

TypedDict definitions for the records held in each JSON document.
Keys match the on-disk layout so existing data files load unchanged.
"""

from typing import List, Optional, TypedDict


class WarningEntry(TypedDict):
    """A single warning. Immutable once created."""
    id: int                 # Creation time in ms, unique within a record
    reason: str
    moderator: str
    timestamp: str          # ISO-8601 issue time


class WarningRecord(TypedDict):
    """Warnings for one member. Invariant: count == len(warnings)."""
    count: int
    warnings: List[WarningEntry]
    lastWarning: Optional[str]


class MarriageLink(TypedDict):
    """One side of a symmetric marriage."""
    spouse: str
    marriageDate: str       # ISO-8601


class ProposalRecord(TypedDict):
    """Pending proposal keyed by "<proposer>_<target>_<ms>"."""
    proposer: str
    target: str
    timestamp: int          # ms epoch
    guildId: str


class DivorceRecord(TypedDict):
    """Pending divorce request keyed by "<applicant>_<spouse>_<ms>"."""
    applicant: str
    spouse: str
    timestamp: int          # ms epoch
    guildId: str


class MuteRecord(TypedDict):
    """Active mute keyed by member id."""
    guildId: str
    reason: str
    duration: int           # minutes
    unmuteTime: int         # ms epoch
    mutedBy: str
    mutedAt: int            # ms epoch


__all__ = [
    "WarningEntry",
    "WarningRecord",
    "MarriageLink",
    "ProposalRecord",
    "DivorceRecord",
    "MuteRecord",
]

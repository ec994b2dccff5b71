"""
Covenant Bot - Error Taxonomy
=============================

Typed errors raised by services and translated into replies by the cogs.

DESIGN:
    Every error carries a short user-facing message. Cogs catch
    CovenantError, reply ephemerally with user_message and leave state
    untouched. CollaboratorFailure marks a failing outside system
    (Discord action, spreadsheet) and is logged rather than surfaced
    as a crash.
"""

from typing import Optional


class CovenantError(Exception):
    """Base class for all expected, user-reportable failures."""

    default_message = "❌ Something went wrong."

    def __init__(self, user_message: Optional[str] = None) -> None:
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


# =============================================================================
# Validation
# =============================================================================

class ValidationError(CovenantError):
    """Bad input; nothing was changed."""

    default_message = "❌ Invalid input."


class SelfTargetError(ValidationError):
    default_message = "❌ You can't propose to yourself!"


class DurationOutOfRangeError(ValidationError):
    default_message = "❌ Mute duration must be between 1 and 40320 minutes (28 days)."


class MalformedRegistrationError(ValidationError):
    default_message = "❌ Registration format is invalid."


# =============================================================================
# Conflict
# =============================================================================

class ConflictError(CovenantError):
    """Request clashes with existing state."""

    default_message = "❌ That conflicts with existing data."


class AlreadyMarriedError(ConflictError):
    default_message = "❌ One of you is already married!"


class ProposalConflictError(ConflictError):
    default_message = "❌ One of you already has a pending proposal! Resolve it first."


class ProposalVoidedError(ConflictError):
    default_message = "❌ This proposal is no longer valid because one of you got married."


class DivorceConflictError(ConflictError):
    default_message = "❌ A divorce request is already pending for this marriage."


class DuplicateRegistrationError(ConflictError):
    default_message = "❌ You have already registered."


# =============================================================================
# Not Found
# =============================================================================

class NotFoundError(CovenantError):
    """Referenced record does not exist."""

    default_message = "❌ That record doesn't exist."


class ExpiredError(NotFoundError):
    default_message = "❌ This request has expired or doesn't exist!"


class NotMarriedError(NotFoundError):
    default_message = "❌ You aren't married, so you can't divorce!"


class WarningNotFoundError(NotFoundError):
    default_message = "❌ Warning ID not found! Use `/check_warn` to see valid IDs."


# =============================================================================
# Permission
# =============================================================================

class PermissionDenied(CovenantError):
    """Caller is not allowed to perform this action."""

    default_message = "❌ You don't have permission to do that."


class ForbiddenError(PermissionDenied):
    default_message = "❌ This request isn't addressed to you!"


# =============================================================================
# Collaborators
# =============================================================================

class CollaboratorFailure(CovenantError):
    """An outside system (Discord action, spreadsheet) failed."""

    default_message = "❌ An external service failed. Please try again later."


__all__ = [
    "CovenantError",
    "ValidationError",
    "SelfTargetError",
    "DurationOutOfRangeError",
    "MalformedRegistrationError",
    "ConflictError",
    "AlreadyMarriedError",
    "ProposalConflictError",
    "ProposalVoidedError",
    "DivorceConflictError",
    "DuplicateRegistrationError",
    "NotFoundError",
    "ExpiredError",
    "NotMarriedError",
    "WarningNotFoundError",
    "PermissionDenied",
    "ForbiddenError",
    "CollaboratorFailure",
]

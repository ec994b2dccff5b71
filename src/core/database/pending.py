"""
Covenant Bot - Pending Request Operations
=========================================

Proposal and divorce requests awaiting a response, on
proposals.json and divorces.json.

DESIGN:
    Request ids are "<initiator>_<counterpart>_<ms>" so a button's
    custom id is enough to find the request again after a restart.
"""

from typing import TYPE_CHECKING, List, Optional, Tuple

from src.core.logger import logger
from src.core.database.models import DivorceRecord, ProposalRecord

if TYPE_CHECKING:
    from src.core.database.base import JsonDocument


def _involves(record: dict, roles: Tuple[str, str], user_ids: set) -> bool:
    return any(record.get(role) in user_ids for role in roles)


def _expired_ids(document: "JsonDocument", cutoff_ms: int) -> List[str]:
    """Drop every request created before cutoff_ms and return their ids."""
    with document.mutate() as data:
        expired = [
            request_id
            for request_id, record in data.items()
            if record.get("timestamp", 0) < cutoff_ms
        ]
        for request_id in expired:
            del data[request_id]
    return expired


class PendingMixin:
    """Mixin for proposal and divorce request operations."""

    proposals: "JsonDocument"
    divorces: "JsonDocument"

    # =========================================================================
    # Proposals
    # =========================================================================

    def add_proposal(
        self,
        proposer_id: int,
        target_id: int,
        guild_id: int,
        now_ms: int,
    ) -> Tuple[str, ProposalRecord]:
        """
        Store a new proposal.

        Returns:
            Tuple of (proposal id, stored record).
        """
        with self.proposals.mutate() as data:
            stamp = now_ms
            proposal_id = f"{proposer_id}_{target_id}_{stamp}"
            while proposal_id in data:
                stamp += 1
                proposal_id = f"{proposer_id}_{target_id}_{stamp}"

            record: ProposalRecord = {
                "proposer": str(proposer_id),
                "target": str(target_id),
                "timestamp": stamp,
                "guildId": str(guild_id),
            }
            data[proposal_id] = record

        logger.tree("Proposal Stored", [
            ("Proposal ID", proposal_id),
            ("Proposer", str(proposer_id)),
            ("Target", str(target_id)),
        ], emoji="💌")

        return proposal_id, dict(record)

    def get_proposal(self, proposal_id: str) -> Optional[ProposalRecord]:
        return self.proposals.get(proposal_id)

    def pop_proposal(self, proposal_id: str) -> Optional[ProposalRecord]:
        """Remove and return a proposal, or None if it no longer exists."""
        if proposal_id not in self.proposals:
            return None
        with self.proposals.mutate() as data:
            return data.pop(proposal_id, None)

    def find_proposal_involving(self, *user_ids: int) -> Optional[Tuple[str, ProposalRecord]]:
        """Find any proposal where one of user_ids is proposer or target."""
        wanted = {str(user_id) for user_id in user_ids}
        for proposal_id, record in self.proposals.read().items():
            if _involves(record, ("proposer", "target"), wanted):
                return proposal_id, record
        return None

    # =========================================================================
    # Divorce Requests
    # =========================================================================

    def add_divorce_request(
        self,
        applicant_id: int,
        spouse_id: int,
        guild_id: int,
        now_ms: int,
    ) -> Tuple[str, DivorceRecord]:
        """
        Store a new divorce request.

        Returns:
            Tuple of (request id, stored record).
        """
        with self.divorces.mutate() as data:
            stamp = now_ms
            request_id = f"{applicant_id}_{spouse_id}_{stamp}"
            while request_id in data:
                stamp += 1
                request_id = f"{applicant_id}_{spouse_id}_{stamp}"

            record: DivorceRecord = {
                "applicant": str(applicant_id),
                "spouse": str(spouse_id),
                "timestamp": stamp,
                "guildId": str(guild_id),
            }
            data[request_id] = record

        logger.tree("Divorce Request Stored", [
            ("Request ID", request_id),
            ("Applicant", str(applicant_id)),
            ("Spouse", str(spouse_id)),
        ], emoji="📜")

        return request_id, dict(record)

    def get_divorce_request(self, request_id: str) -> Optional[DivorceRecord]:
        return self.divorces.get(request_id)

    def pop_divorce_request(self, request_id: str) -> Optional[DivorceRecord]:
        """Remove and return a divorce request, or None if it no longer exists."""
        if request_id not in self.divorces:
            return None
        with self.divorces.mutate() as data:
            return data.pop(request_id, None)

    def find_divorce_involving(self, *user_ids: int) -> Optional[Tuple[str, DivorceRecord]]:
        """Find any divorce request where one of user_ids is applicant or spouse."""
        wanted = {str(user_id) for user_id in user_ids}
        for request_id, record in self.divorces.read().items():
            if _involves(record, ("applicant", "spouse"), wanted):
                return request_id, record
        return None

    # =========================================================================
    # Expiry
    # =========================================================================

    def expire_requests(self, cutoff_ms: int) -> Tuple[List[str], List[str]]:
        """
        Drop proposals and divorce requests created before cutoff_ms.

        Returns:
            Tuple of (expired proposal ids, expired divorce request ids).
        """
        return _expired_ids(self.proposals, cutoff_ms), _expired_ids(self.divorces, cutoff_ms)


__all__ = ["PendingMixin"]

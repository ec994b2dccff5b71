"""
Covenant Bot - Relationship Workflow
====================================

Proposal, marriage and divorce state machine.

DESIGN:
    States per pair of members: single, proposal pending, married and
    divorce pending. Every transition runs inside Store.transaction()
    so its checks and writes see one consistent view of the marriage
    and request documents.

    Divorce policy is a flag. With mutual consent (the default) divorce()
    files a request the spouse must accept. With unilateral divorce it
    dissolves the marriage immediately.

    A request that is gone (answered, swept, or double-clicked) is
    reported as NotFoundError, never as a crash.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from src.core.logger import logger
from src.core.constants import MS_PER_SECOND, PENDING_REQUEST_TTL
from src.core.database import DivorceRecord, MarriageLink, ProposalRecord, Store
from src.core.errors import (
    AlreadyMarriedError,
    DivorceConflictError,
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    NotMarriedError,
    ProposalConflictError,
    ProposalVoidedError,
    SelfTargetError,
)
from src.utils.time_format import iso_from_ms, now_ms


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class ProposalAccepted:
    proposal_id: str
    proposer_id: int
    target_id: int
    married_at: str


@dataclass(frozen=True)
class DivorceRequested:
    request_id: str
    applicant_id: int
    spouse_id: int


@dataclass(frozen=True)
class DivorceCompleted:
    applicant_id: int
    spouse_id: int
    married_at: Optional[str]
    dissolved: bool = True


DivorceResult = Union[DivorceRequested, DivorceCompleted]


# =============================================================================
# Workflow
# =============================================================================

class RelationshipWorkflow:
    """
    Consent-based marriage lifecycle.

    Attributes:
        store: Backing store.
        unilateral_divorce: Dissolve on divorce() without spouse consent.
        request_ttl: Seconds a proposal or divorce request stays answerable.
    """

    def __init__(
        self,
        store: Store,
        unilateral_divorce: bool = False,
        request_ttl: int = PENDING_REQUEST_TTL,
    ) -> None:
        self.store = store
        self.unilateral_divorce = unilateral_divorce
        self.request_ttl = request_ttl

    @property
    def ttl_ms(self) -> int:
        return self.request_ttl * MS_PER_SECOND

    def _is_stale(self, record: dict, current: int) -> bool:
        return current - record.get("timestamp", 0) > self.ttl_ms

    # =========================================================================
    # Queries
    # =========================================================================

    def marriage_of(self, member_id: int) -> Optional[MarriageLink]:
        return self.store.get_marriage(member_id)

    # =========================================================================
    # Proposals
    # =========================================================================

    def propose(
        self,
        proposer_id: int,
        target_id: int,
        guild_id: int,
        now: Optional[int] = None,
    ) -> Tuple[str, ProposalRecord]:
        """
        Create a proposal from proposer to target.

        Raises:
            SelfTargetError: proposer and target are the same member.
            AlreadyMarriedError: either side is married.
            ProposalConflictError: either side is proposer or target of
                any pending proposal.
        """
        if proposer_id == target_id:
            raise SelfTargetError()

        current = now if now is not None else now_ms()

        with self.store.transaction():
            if self.store.is_married(proposer_id) or self.store.is_married(target_id):
                raise AlreadyMarriedError()

            # Stale requests no longer block anyone
            self.store.expire_requests(current - self.ttl_ms)

            if self.store.find_proposal_involving(proposer_id, target_id) is not None:
                raise ProposalConflictError()

            return self.store.add_proposal(proposer_id, target_id, guild_id, current)

    def accept_proposal(
        self,
        proposal_id: str,
        actor_id: int,
        now: Optional[int] = None,
    ) -> ProposalAccepted:
        """
        Accept a proposal as its target and marry the pair.

        Raises:
            NotFoundError: the proposal no longer exists.
            ForbiddenError: actor is not the proposal's target.
            ExpiredError: the proposal outlived its window (discarded).
            ProposalVoidedError: either side married meanwhile (discarded).
        """
        current = now if now is not None else now_ms()

        with self.store.transaction():
            record = self.store.get_proposal(proposal_id)
            if record is None:
                raise NotFoundError("❌ This proposal has expired or doesn't exist!")

            if record["target"] != str(actor_id):
                raise ForbiddenError("❌ This proposal isn't for you!")

            if self._is_stale(record, current):
                self.store.pop_proposal(proposal_id)
                raise ExpiredError("❌ This proposal has expired!")

            proposer_id = int(record["proposer"])
            target_id = int(record["target"])

            if self.store.is_married(proposer_id) or self.store.is_married(target_id):
                self.store.pop_proposal(proposal_id)
                logger.tree("Proposal Voided", [
                    ("Proposal ID", proposal_id),
                    ("Reason", "A party married meanwhile"),
                ], emoji="🚫")
                raise ProposalVoidedError()

            married_at = iso_from_ms(current)
            self.store.pop_proposal(proposal_id)
            self.store.create_marriage(proposer_id, target_id, married_at)

        return ProposalAccepted(
            proposal_id=proposal_id,
            proposer_id=proposer_id,
            target_id=target_id,
            married_at=married_at,
        )

    def reject_proposal(self, proposal_id: str, actor_id: int) -> ProposalRecord:
        """
        Reject a proposal as its target.

        Raises:
            NotFoundError: the proposal no longer exists.
            ForbiddenError: actor is not the proposal's target.
        """
        with self.store.transaction():
            record = self.store.get_proposal(proposal_id)
            if record is None:
                raise NotFoundError("❌ This proposal has expired or doesn't exist!")
            if record["target"] != str(actor_id):
                raise ForbiddenError("❌ This proposal isn't for you!")
            self.store.pop_proposal(proposal_id)

        logger.tree("Proposal Rejected", [
            ("Proposal ID", proposal_id),
            ("Proposer", record["proposer"]),
            ("Target", record["target"]),
        ], emoji="💔")

        return record

    # =========================================================================
    # Divorce
    # =========================================================================

    def divorce(
        self,
        applicant_id: int,
        guild_id: int,
        now: Optional[int] = None,
    ) -> DivorceResult:
        """
        Divorce, or ask the spouse for one.

        Returns:
            DivorceCompleted under the unilateral policy, otherwise
            DivorceRequested.

        Raises:
            NotMarriedError: applicant has no spouse.
            DivorceConflictError: a request is already pending for the couple.
        """
        current = now if now is not None else now_ms()

        with self.store.transaction():
            link = self.store.get_marriage(applicant_id)
            if link is None:
                raise NotMarriedError()

            spouse_id = int(link["spouse"])

            if self.unilateral_divorce:
                self.store.dissolve_marriage(applicant_id, spouse_id)
                self._drop_divorce_requests(applicant_id, spouse_id)
                return DivorceCompleted(
                    applicant_id=applicant_id,
                    spouse_id=spouse_id,
                    married_at=link.get("marriageDate"),
                )

            self.store.expire_requests(current - self.ttl_ms)

            if self.store.find_divorce_involving(applicant_id, spouse_id) is not None:
                raise DivorceConflictError()

            request_id, _ = self.store.add_divorce_request(
                applicant_id, spouse_id, guild_id, current
            )

        return DivorceRequested(
            request_id=request_id,
            applicant_id=applicant_id,
            spouse_id=spouse_id,
        )

    def accept_divorce(
        self,
        request_id: str,
        actor_id: int,
        now: Optional[int] = None,
    ) -> DivorceCompleted:
        """
        Accept a divorce request as the spouse.

        If the couple is no longer married the request is just discarded
        and the result has dissolved=False.

        Raises:
            NotFoundError: the request no longer exists.
            ForbiddenError: actor is not the addressed spouse.
            ExpiredError: the request outlived its window (discarded).
        """
        current = now if now is not None else now_ms()

        with self.store.transaction():
            record = self._addressed_divorce(request_id, actor_id)

            if self._is_stale(record, current):
                self.store.pop_divorce_request(request_id)
                raise ExpiredError("❌ This divorce request has expired!")

            applicant_id = int(record["applicant"])
            spouse_id = int(record["spouse"])
            self.store.pop_divorce_request(request_id)

            link = self.store.get_marriage(applicant_id)
            still_married = link is not None and link["spouse"] == str(spouse_id)
            if still_married:
                self.store.dissolve_marriage(applicant_id, spouse_id)

        return DivorceCompleted(
            applicant_id=applicant_id,
            spouse_id=spouse_id,
            married_at=link.get("marriageDate") if still_married else None,
            dissolved=still_married,
        )

    def reject_divorce(self, request_id: str, actor_id: int) -> DivorceRecord:
        """
        Reject a divorce request as the spouse. The marriage stays.

        Raises:
            NotFoundError: the request no longer exists.
            ForbiddenError: actor is not the addressed spouse.
        """
        with self.store.transaction():
            record = self._addressed_divorce(request_id, actor_id)
            self.store.pop_divorce_request(request_id)

        logger.tree("Divorce Rejected", [
            ("Request ID", request_id),
            ("Applicant", record["applicant"]),
            ("Spouse", record["spouse"]),
        ], emoji="💞")

        return record

    def _addressed_divorce(self, request_id: str, actor_id: int) -> DivorceRecord:
        record = self.store.get_divorce_request(request_id)
        if record is None:
            raise NotFoundError("❌ This divorce request has expired or doesn't exist!")
        if record["spouse"] != str(actor_id):
            raise ForbiddenError("❌ This divorce request isn't for you!")
        return record

    def _drop_divorce_requests(self, *member_ids: int) -> None:
        while True:
            found = self.store.find_divorce_involving(*member_ids)
            if found is None:
                return
            self.store.pop_divorce_request(found[0])

    # =========================================================================
    # Expiry
    # =========================================================================

    def expire_pending(self, now: Optional[int] = None) -> Tuple[int, int]:
        """
        Drop every request older than the TTL.

        Returns:
            Tuple of (expired proposals, expired divorce requests).
        """
        current = now if now is not None else now_ms()
        with self.store.transaction():
            proposals, divorces = self.store.expire_requests(current - self.ttl_ms)
        return len(proposals), len(divorces)


__all__ = [
    "ProposalAccepted",
    "DivorceRequested",
    "DivorceCompleted",
    "DivorceResult",
    "RelationshipWorkflow",
]

"""
Covenant Bot - Marriage Button Tests
====================================

Tests for the persistent proposal and divorce buttons with mocked interactions.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.commands.marriage.views import (
    DivorceAcceptButton,
    DivorceRejectButton,
    ProposalAcceptButton,
    ProposalRejectButton,
    ProposalView,
)


GUILD = 5
ALICE, BOB, CAROL = 101, 202, 303
T0 = 1_700_000_000_000


@pytest.fixture
def click(mock_interaction, workflow):
    """Interaction for a button click by BOB on a bot wired to the workflow."""
    mock_interaction.client = MagicMock()
    mock_interaction.client.relationships = workflow
    mock_interaction.user.id = BOB
    mock_interaction.user.mention = f"<@{BOB}>"
    return mock_interaction


class TestCustomIds:

    def test_custom_id_carries_request_id(self):
        button = ProposalAcceptButton(f"{ALICE}_{BOB}_{T0}")
        assert button.item.custom_id == f"accept_{ALICE}_{BOB}_{T0}"

    def test_templates_do_not_overlap(self):
        request_id = f"{ALICE}_{BOB}_{T0}"
        reject = ProposalRejectButton(request_id)
        divorce_reject = DivorceRejectButton(request_id)

        assert reject.template.fullmatch(f"reject_{request_id}")
        assert not reject.template.fullmatch(f"divorce_reject_{request_id}")
        assert divorce_reject.template.fullmatch(f"divorce_reject_{request_id}")

    @pytest.mark.asyncio
    async def test_proposal_view_has_both_buttons(self):
        view = ProposalView(f"{ALICE}_{BOB}_{T0}")
        assert view.timeout is None
        assert len(view.children) == 2


class TestProposalButtons:

    @pytest.mark.asyncio
    async def test_accept_marries(self, click, workflow, store):
        proposal_id, _ = workflow.propose(ALICE, BOB, GUILD)

        await ProposalAcceptButton(proposal_id).callback(click)

        assert store.get_marriage(BOB)["spouse"] == str(ALICE)
        _, kwargs = click.response.edit_message.call_args
        assert kwargs["view"] is None

    @pytest.mark.asyncio
    async def test_wrong_member_keeps_buttons(self, click, workflow, store):
        proposal_id, _ = workflow.propose(ALICE, CAROL, GUILD)

        await ProposalAcceptButton(proposal_id).callback(click)

        click.response.send_message.assert_awaited_once()
        click.message.edit.assert_not_awaited()
        assert store.get_proposal(proposal_id) is not None

    @pytest.mark.asyncio
    async def test_missing_request_strips_buttons(self, click):
        await ProposalRejectButton(f"{ALICE}_{BOB}_{T0}").callback(click)

        _, kwargs = click.response.send_message.call_args
        assert kwargs["ephemeral"] is True
        click.message.edit.assert_awaited_once_with(view=None)

    @pytest.mark.asyncio
    async def test_reject(self, click, workflow, store):
        proposal_id, _ = workflow.propose(ALICE, BOB, GUILD)

        await ProposalRejectButton(proposal_id).callback(click)

        assert store.get_proposal(proposal_id) is None
        assert not store.is_married(BOB)
        click.response.edit_message.assert_awaited_once()


class TestDivorceButtons:

    @pytest.mark.asyncio
    async def test_accept_dissolves_and_notifies_applicant(self, click, workflow, store, mock_guild):
        store.create_marriage(ALICE, BOB, "2024-01-01T00:00:00.000Z")
        requested = workflow.divorce(ALICE, GUILD)
        applicant = MagicMock()
        applicant.send = AsyncMock()
        mock_guild.get_member.return_value = applicant

        await DivorceAcceptButton(requested.request_id).callback(click)

        assert not store.is_married(ALICE)
        assert not store.is_married(BOB)
        mock_guild.get_member.assert_called_with(ALICE)
        applicant.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reject_keeps_marriage(self, click, workflow, store):
        store.create_marriage(ALICE, BOB, "2024-01-01T00:00:00.000Z")
        requested = workflow.divorce(ALICE, GUILD)

        await DivorceRejectButton(requested.request_id).callback(click)

        assert store.is_married(ALICE)
        assert store.get_divorce_request(requested.request_id) is None

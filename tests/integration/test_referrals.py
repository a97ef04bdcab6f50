"""
Integration tests for referral registration.

Tests cover:
- Bounty distribution
- Self, duplicate and circular referral rejection
- Authorization
- Child list queries
"""

import pytest

from incentives.config.business_constants import TOKEN_UNIT
from incentives.models.enums import EventType
from incentives.utils.exceptions import (
    AlreadyReferred,
    CircularReferral,
    InvalidAddress,
    SelfReferral,
    Unauthorized,
)
from incentives.utils.validation import ZERO_ADDRESS
from tests.helpers import ALICE, BACKEND, BOB, CAROL, DAVE, GENESIS, OWNER


class TestProcessReferral:
    """Test successful registrations."""

    @pytest.mark.asyncio
    async def test_bounties_minted_exactly(self, ledger):
        """Referrer gets 50 tokens, referee 25, nothing more."""
        result = await ledger.process_referral(BACKEND, BOB, ALICE)

        assert result.referee == BOB
        assert result.referrer == ALICE
        assert result.registered_at == GENESIS
        assert await ledger.balance_of(ALICE) == 50 * TOKEN_UNIT
        assert await ledger.balance_of(BOB) == 25 * TOKEN_UNIT

    @pytest.mark.asyncio
    async def test_edge_recorded(self, ledger):
        """Referee points at referrer and appears in its child list."""
        await ledger.process_referral(BACKEND, BOB, ALICE)

        assert await ledger.get_referrer(BOB) == ALICE
        assert await ledger.get_referrer(ALICE) is None
        assert await ledger.get_referees(ALICE) == [BOB]
        assert await ledger.get_referee_count(ALICE) == 1

    @pytest.mark.asyncio
    async def test_events_emitted(self, ledger):
        """Registration and distribution are recorded in order."""
        await ledger.process_referral(BACKEND, BOB, ALICE)

        events = await ledger.get_events(actor=BACKEND)

        assert [e.event_type for e in events] == [
            EventType.REFERRAL_REGISTERED.value,
            EventType.REWARDS_DISTRIBUTED.value,
        ]
        assert events[0].payload["referee"] == BOB
        assert events[0].payload["referrer"] == ALICE
        assert events[1].payload["referrer_reward"] == 50 * TOKEN_UNIT
        assert events[1].payload["referee_reward"] == 25 * TOKEN_UNIT

    @pytest.mark.asyncio
    async def test_children_in_registration_order(self, ledger):
        """Child list keeps insertion order."""
        for referee in (CAROL, BOB, DAVE):
            await ledger.process_referral(BACKEND, referee, ALICE)

        assert await ledger.get_referees(ALICE) == [CAROL, BOB, DAVE]
        assert await ledger.get_referee_count(ALICE) == 3
        assert await ledger.get_referee_count(BOB) == 0

    @pytest.mark.asyncio
    async def test_lowercase_identities_normalized(self, ledger):
        """Identities are stored in checksum form."""
        await ledger.process_referral(BACKEND.lower(), BOB.lower(), ALICE.lower())

        assert await ledger.get_referees(ALICE) == [BOB]


class TestRejectedReferrals:
    """Test referral rejections."""

    @pytest.mark.asyncio
    async def test_direct_cycle(self, ledger):
        """(B, A) then (A, B) is circular."""
        await ledger.process_referral(BACKEND, BOB, ALICE)

        with pytest.raises(CircularReferral):
            await ledger.process_referral(BACKEND, ALICE, BOB)

        assert await ledger.get_referrer(ALICE) is None

    @pytest.mark.asyncio
    async def test_deep_cycle(self, ledger):
        """Referee deeper up the chain is also circular."""
        await ledger.process_referral(BACKEND, BOB, ALICE)
        await ledger.process_referral(BACKEND, CAROL, BOB)
        await ledger.process_referral(BACKEND, DAVE, CAROL)

        with pytest.raises(CircularReferral):
            await ledger.process_referral(BACKEND, ALICE, DAVE)

    @pytest.mark.asyncio
    async def test_self_referral(self, ledger):
        """(A, A) is a self-referral."""
        with pytest.raises(SelfReferral):
            await ledger.process_referral(BACKEND, ALICE, ALICE)

    @pytest.mark.asyncio
    async def test_self_referral_any_case(self, ledger):
        """Case differences do not hide a self-referral."""
        with pytest.raises(SelfReferral):
            await ledger.process_referral(BACKEND, ALICE, ALICE.lower())

    @pytest.mark.asyncio
    async def test_already_referred(self, ledger):
        """(B, C) after (B, A) is rejected."""
        await ledger.process_referral(BACKEND, BOB, ALICE)

        with pytest.raises(AlreadyReferred):
            await ledger.process_referral(BACKEND, BOB, CAROL)

        assert await ledger.get_referrer(BOB) == ALICE
        assert await ledger.get_referee_count(CAROL) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad",
        ["", "0x1234", ZERO_ADDRESS, None,
         "0x" + "1" * 20 + "_" + "1" * 19, "0x-" + "1" * 39],
    )
    async def test_malformed_identities(self, ledger, bad):
        """Empty, short, zero and non-hex identities are rejected."""
        with pytest.raises(InvalidAddress):
            await ledger.process_referral(BACKEND, bad, ALICE)
        with pytest.raises(InvalidAddress):
            await ledger.process_referral(BACKEND, ALICE, bad)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("caller", [OWNER, ALICE, BOB])
    async def test_unauthorized_caller_changes_nothing(self, ledger, caller):
        """Non-backend caller: no edge, no mint, no event."""
        with pytest.raises(Unauthorized):
            await ledger.process_referral(caller, BOB, ALICE)

        assert await ledger.get_referrer(BOB) is None
        assert await ledger.get_referees(ALICE) == []
        assert await ledger.balance_of(ALICE) == 0
        assert await ledger.balance_of(BOB) == 0
        assert await ledger.get_events() == []

    @pytest.mark.asyncio
    async def test_rejection_mints_nothing(self, ledger):
        """A rejected registration leaves balances untouched."""
        await ledger.process_referral(BACKEND, BOB, ALICE)

        with pytest.raises(CircularReferral):
            await ledger.process_referral(BACKEND, ALICE, BOB)

        assert await ledger.balance_of(ALICE) == 50 * TOKEN_UNIT
        assert await ledger.balance_of(BOB) == 25 * TOKEN_UNIT


class TestBountyConfiguration:
    """Test interaction with administrative bounty settings."""

    @pytest.mark.asyncio
    async def test_reconfigured_amounts_apply(self, ledger):
        """New amounts are used by later registrations."""
        await ledger.set_reward_amounts(OWNER, 7, 3)

        result = await ledger.process_referral(BACKEND, BOB, ALICE)

        assert (result.referrer_reward, result.referee_reward) == (7, 3)
        assert await ledger.balance_of(ALICE) == 7
        assert await ledger.balance_of(BOB) == 3

    @pytest.mark.asyncio
    async def test_zero_bounty_skips_mint(self, ledger):
        """A zero bounty disables that side."""
        await ledger.set_reward_amounts(OWNER, 10, 0)

        await ledger.process_referral(BACKEND, BOB, ALICE)

        assert await ledger.balance_of(ALICE) == 10
        assert await ledger.balance_of(BOB) == 0

    @pytest.mark.asyncio
    async def test_new_backend_authorized(self, ledger):
        """Only the current backend may register."""
        await ledger.set_authorized_backend(OWNER, CAROL)

        with pytest.raises(Unauthorized):
            await ledger.process_referral(BACKEND, BOB, ALICE)

        await ledger.process_referral(CAROL, BOB, ALICE)
        assert await ledger.get_referrer(BOB) == ALICE


class TestReferralChain:
    """Test ancestor chain reads."""

    @pytest.mark.asyncio
    async def test_chain_nearest_first(self, ledger):
        """Chain lists referrer, its referrer, and so on up to the root."""
        await ledger.process_referral(BACKEND, BOB, ALICE)
        await ledger.process_referral(BACKEND, CAROL, BOB)
        await ledger.process_referral(BACKEND, DAVE, CAROL)

        assert await ledger.get_referral_chain(DAVE) == [CAROL, BOB, ALICE]
        assert await ledger.get_referral_chain(ALICE) == []

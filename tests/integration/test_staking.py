"""
Integration tests for staking, withdrawal and harvesting.

Tests cover:
- Linear accrual scenario
- Stake / withdraw validation
- Harvest payout and checkpointing
- Position token issuance and metadata
- Monotonic account metrics
"""

import pytest

from incentives.models.enums import EventType, TokenKind
from incentives.services.token_registry import decode_token_uri
from incentives.utils.exceptions import (
    InvalidAddress,
    InvalidAmount,
    NoRewardsToHarvest,
    UnknownAccount,
)
from tests.helpers import ALICE, BOB, GENESIS, ONE_YEAR


def attributes(uri):
    """Decode position token attributes into a dict."""
    return {a["trait_type"]: a["value"] for a in decode_token_uri(uri)["attributes"]}


class TestStake:
    """Test stake entry point."""

    @pytest.mark.asyncio
    async def test_first_stake_initializes_account(self, ledger):
        """First stake sets principal, checkpoint and issues one token."""
        info = await ledger.stake(ALICE, 1000)

        assert info.initialized is True
        assert info.staked_amount == 1000
        assert info.last_checkpoint == GENESIS
        assert info.time_weighted_score == 0
        assert info.token_id is not None

    @pytest.mark.asyncio
    async def test_one_year_pending_reward(self, ledger, clock):
        """stake(1000) then one year later 10% is pending."""
        await ledger.stake(ALICE, 1000)
        clock.advance(ONE_YEAR)

        assert await ledger.pending_rewards(ALICE) == 100

    @pytest.mark.asyncio
    async def test_zero_stake_rejected(self, ledger):
        """Zero amount is invalid and creates nothing."""
        with pytest.raises(InvalidAmount):
            await ledger.stake(ALICE, 0)

        info = await ledger.get_user_info(ALICE)
        assert info.initialized is False
        assert await ledger.get_events(event_type=EventType.STAKED) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "caller", ["not-an-address", "0x" + "1" * 20 + "_" + "1" * 19]
    )
    async def test_malformed_caller_rejected(self, ledger, caller):
        """Caller identity must be a valid address."""
        with pytest.raises(InvalidAddress):
            await ledger.stake(caller, 10)

    @pytest.mark.asyncio
    async def test_second_stake_settles_and_keeps_token(self, ledger, clock):
        """Later stakes settle the interval and reuse the position token."""
        first = await ledger.stake(ALICE, 1000)
        clock.advance(100)

        second = await ledger.stake(ALICE, 500)

        assert second.staked_amount == 1500
        assert second.time_weighted_score == 1000 * 100
        assert second.last_checkpoint == GENESIS + 100
        assert second.token_id == first.token_id

        issued = await ledger.get_events(event_type=EventType.TOKEN_ISSUED)
        assert len(issued) == 1
        assert issued[0].payload["kind"] == TokenKind.POSITION.value

    @pytest.mark.asyncio
    async def test_metadata_refreshed(self, ledger, clock):
        """Position metadata mirrors state after every stake."""
        await ledger.stake(ALICE, 1000)
        clock.advance(10)
        await ledger.stake(ALICE, 1000)

        attrs = attributes(await ledger.get_token_uri(ALICE))

        assert attrs["Staked Amount"] == "2000"
        assert attrs["Time Weighted Score"] == "10000"
        assert attrs["Rewards Earned"] == "0"
        assert attrs["Tier"] == "Unranked"

    @pytest.mark.asyncio
    async def test_event_order(self, ledger):
        """First stake emits staked, token issued, metadata updated."""
        await ledger.stake(ALICE, 1000)

        events = await ledger.get_events(actor=ALICE)

        assert [e.event_type for e in events] == [
            EventType.STAKED.value,
            EventType.TOKEN_ISSUED.value,
            EventType.METADATA_UPDATED.value,
        ]
        assert events[0].payload == {"amount": 1000, "staked_amount": 1000}
        assert events[0].timestamp == GENESIS


class TestWithdraw:
    """Test withdraw entry point."""

    @pytest.mark.asyncio
    async def test_withdraw_without_stake(self, ledger):
        """Never-staked identity cannot withdraw."""
        with pytest.raises(UnknownAccount):
            await ledger.withdraw(BOB, 1)

    @pytest.mark.asyncio
    async def test_withdraw_exceeding_balance(self, ledger):
        """Withdrawing more than staked is invalid."""
        await ledger.stake(ALICE, 100)

        with pytest.raises(InvalidAmount):
            await ledger.withdraw(ALICE, 101)

        assert (await ledger.get_user_info(ALICE)).staked_amount == 100

    @pytest.mark.asyncio
    async def test_withdraw_zero(self, ledger):
        """Zero withdrawal is invalid."""
        await ledger.stake(ALICE, 100)

        with pytest.raises(InvalidAmount):
            await ledger.withdraw(ALICE, 0)

    @pytest.mark.asyncio
    async def test_withdraw_full_balance(self, ledger, clock):
        """Full withdrawal keeps the account initialized with its score."""
        await ledger.stake(ALICE, 100)
        clock.advance(50)

        info = await ledger.withdraw(ALICE, 100)

        assert info.staked_amount == 0
        assert info.time_weighted_score == 5000
        assert info.initialized is True

    @pytest.mark.asyncio
    async def test_withdraw_then_restake(self, ledger, clock):
        """Withdraw + stake of the same amount keeps principal, grows score."""
        await ledger.stake(ALICE, 1000)
        clock.advance(30)
        before = await ledger.withdraw(ALICE, 400)
        clock.advance(30)

        after = await ledger.stake(ALICE, 400)

        assert after.staked_amount == 1000
        assert after.time_weighted_score > before.time_weighted_score
        assert after.time_weighted_score == 1000 * 30 + 600 * 30


class TestHarvest:
    """Test harvest entry point."""

    @pytest.mark.asyncio
    async def test_harvest_nothing_pending(self, ledger):
        """Harvest right after staking has nothing to pay."""
        await ledger.stake(ALICE, 1000)

        with pytest.raises(NoRewardsToHarvest):
            await ledger.harvest_rewards(ALICE)

    @pytest.mark.asyncio
    async def test_harvest_unknown_account(self, ledger):
        """Never-staked identity has nothing to harvest."""
        with pytest.raises(NoRewardsToHarvest):
            await ledger.harvest_rewards(BOB)

    @pytest.mark.asyncio
    async def test_harvest_pays_pending(self, ledger, clock):
        """Harvest pays the pre-settlement pending amount."""
        await ledger.stake(ALICE, 1000)
        clock.advance(ONE_YEAR)

        result = await ledger.harvest_rewards(ALICE)

        assert result.amount == 100
        assert result.rewards_earned == 100
        assert await ledger.balance_of(ALICE) == 100

        info = await ledger.get_user_info(ALICE)
        assert info.rewards_earned == 100
        assert info.last_checkpoint == GENESIS + ONE_YEAR
        assert info.time_weighted_score == 1000 * ONE_YEAR
        assert info.pending_rewards == 0

    @pytest.mark.asyncio
    async def test_second_harvest_needs_new_interval(self, ledger, clock):
        """Checkpoint advance prevents paying the same interval twice."""
        await ledger.stake(ALICE, 1000)
        clock.advance(ONE_YEAR)
        await ledger.harvest_rewards(ALICE)

        with pytest.raises(NoRewardsToHarvest):
            await ledger.harvest_rewards(ALICE)

    @pytest.mark.asyncio
    async def test_harvest_refreshes_metadata(self, ledger, clock):
        """Rewards earned show up in token metadata."""
        await ledger.stake(ALICE, 1000)
        clock.advance(ONE_YEAR)
        await ledger.harvest_rewards(ALICE)

        attrs = attributes(await ledger.get_token_uri(ALICE))

        assert attrs["Rewards Earned"] == "100"


class TestReadOperations:
    """Test read-only entry points."""

    @pytest.mark.asyncio
    async def test_user_info_unknown_account(self, ledger):
        """Unknown identity reads as a zeroed, uninitialized snapshot."""
        info = await ledger.get_user_info(BOB)

        assert info.account == BOB
        assert info.initialized is False
        assert info.staked_amount == 0
        assert info.token_id is None
        assert info.tier_name == "Unranked"

    @pytest.mark.asyncio
    async def test_pending_unknown_account(self, ledger):
        """Unknown identity has nothing pending."""
        assert await ledger.pending_rewards(BOB) == 0

    @pytest.mark.asyncio
    async def test_token_uri_unknown_account(self, ledger):
        """Token lookup for an uninitialized account fails."""
        with pytest.raises(UnknownAccount):
            await ledger.get_token_uri(BOB)

    @pytest.mark.asyncio
    async def test_lowercase_identity_resolves(self, ledger):
        """Identity case does not split accounts."""
        await ledger.stake(ALICE.lower(), 10)

        assert (await ledger.get_user_info(ALICE)).staked_amount == 10


class TestMonotonicMetrics:
    """Score, rewards and tier never decrease."""

    @pytest.mark.asyncio
    async def test_metrics_non_decreasing(self, ledger, clock):
        """Mixed sequence of operations keeps metrics monotonic."""
        operations = [
            ("stake", 5000),
            ("advance", ONE_YEAR // 4),
            ("withdraw", 2000),
            ("advance", ONE_YEAR // 4),
            ("harvest", None),
            ("stake", 7000),
            ("advance", ONE_YEAR),
            ("withdraw", 10000),
            ("advance", ONE_YEAR),
            ("harvest", None),
            ("stake", 1),
        ]
        previous = await ledger.get_user_info(ALICE)

        for op, value in operations:
            if op == "advance":
                clock.advance(value)
                continue
            if op == "stake":
                await ledger.stake(ALICE, value)
            elif op == "withdraw":
                await ledger.withdraw(ALICE, value)
            else:
                try:
                    await ledger.harvest_rewards(ALICE)
                except NoRewardsToHarvest:
                    pass

            current = await ledger.get_user_info(ALICE)
            assert current.time_weighted_score >= previous.time_weighted_score
            assert current.rewards_earned >= previous.rewards_earned
            assert current.current_tier >= previous.current_tier
            assert current.staked_amount >= 0
            previous = current


class TestCheckpointWindow:
    """Stake and withdraw settle the checkpoint the same way harvest does."""

    @pytest.mark.asyncio
    async def test_stake_restarts_pending_window(self, ledger, clock):
        """Pending rewards are measured from the latest checkpoint only."""
        await ledger.stake(ALICE, 1000)
        clock.advance(ONE_YEAR)
        assert await ledger.pending_rewards(ALICE) == 100

        await ledger.stake(ALICE, 1000)

        assert await ledger.pending_rewards(ALICE) == 0
        clock.advance(ONE_YEAR)
        assert await ledger.pending_rewards(ALICE) == 200

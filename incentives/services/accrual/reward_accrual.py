"""
Reward accrual engine.

Lazy checkpoint accounting: nothing accrues on a clock. Every mutating call
first settles the interval since the account's last checkpoint, folding
``staked_amount * elapsed`` into the time-weighted score.

Pending rewards are simple linear interest on the currently staked
principal since the last checkpoint; the time-weighted score is an
analytics metric only and never feeds the reward amount.
"""

from loguru import logger

from incentives.config.business_constants import (
    REWARD_RATE,
    REWARD_RATE_DENOMINATOR,
    SECONDS_PER_YEAR,
)
from incentives.models.staker_account import StakerAccount
from incentives.utils.exceptions import ConfigurationError


class RewardAccrualEngine:
    """
    Checkpoint-based reward accrual.

    Stateless apart from its rate parameters; all state lives on the
    StakerAccount passed in.
    """

    def __init__(
        self,
        rate: int = REWARD_RATE,
        rate_denominator: int = REWARD_RATE_DENOMINATOR,
        seconds_per_year: int = SECONDS_PER_YEAR,
    ) -> None:
        """
        Initialize accrual engine.

        Args:
            rate: Yearly rate numerator
            rate_denominator: Yearly rate denominator
            seconds_per_year: Accrual year length

        Raises:
            ConfigurationError: If parameters are out of range
        """
        if rate < 0:
            raise ConfigurationError(f"Reward rate cannot be negative: {rate}")
        if rate_denominator <= 0 or seconds_per_year <= 0:
            raise ConfigurationError(
                "Rate denominator and seconds per year must be positive"
            )

        self.rate = rate
        self.rate_denominator = rate_denominator
        self.seconds_per_year = seconds_per_year

    @staticmethod
    def elapsed_since_checkpoint(account: StakerAccount, now: int) -> int:
        """Seconds since the last checkpoint; a clock behind it counts as 0."""
        return max(0, now - account.last_checkpoint)

    def settle(self, account: StakerAccount, now: int) -> int:
        """
        Settle accrual up to now and advance the checkpoint.

        First touch of an uninitialized account only sets the checkpoint:
        there is no prior interval to account for.

        Args:
            account: Staker account (mutated in place)
            now: Current ledger time

        Returns:
            Score added by this settlement
        """
        if not account.initialized:
            account.last_checkpoint = now
            return 0

        elapsed = self.elapsed_since_checkpoint(account, now)
        added = 0
        if account.staked_amount > 0 and elapsed > 0:
            added = account.staked_amount * elapsed
            account.time_weighted_score = account.time_weighted_score + added

        # Never move the checkpoint backwards
        account.last_checkpoint = max(account.last_checkpoint, now)

        if added:
            logger.debug(
                "Accrual settled",
                extra={
                    "account": account.account,
                    "elapsed": elapsed,
                    "score_added": added,
                },
            )

        return added

    def pending_reward(self, account: StakerAccount | None, now: int) -> int:
        """
        Calculate rewards accrued since the last checkpoint.

        Formula: staked * rate * elapsed / (rate_denominator * seconds_per_year)
        rounded down to whole base units.

        Args:
            account: Staker account, or None for an unknown identity
            now: Current ledger time

        Returns:
            Pending reward in base units

        Example:
            >>> engine = RewardAccrualEngine()
            >>> # 1000 staked for one year at 10%
            >>> engine.pending_reward(account, account.last_checkpoint + 31_536_000)
            100
        """
        if account is None or not account.initialized:
            return 0
        if account.staked_amount <= 0:
            return 0

        elapsed = self.elapsed_since_checkpoint(account, now)
        return (account.staked_amount * self.rate * elapsed) // (
            self.rate_denominator * self.seconds_per_year
        )

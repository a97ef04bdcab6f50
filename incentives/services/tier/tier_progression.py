"""
Tier progression engine.

Promotes accounts through the tier table based on cumulative harvested
rewards. Every threshold crossed yields its own promotion, so a single
large harvest that skips tiers still produces one milestone per tier.
"""

from collections.abc import Iterable

from loguru import logger

from incentives.config.tiers import (
    DEFAULT_TIER_TABLE,
    TierConfig,
    build_tier_table,
    tier_name,
    tiers_reached,
)
from incentives.models.staker_account import StakerAccount


class TierProgressionEngine:
    """Tier table lookup and promotion."""

    def __init__(
        self, table: Iterable[tuple[int, str]] = DEFAULT_TIER_TABLE
    ) -> None:
        """
        Initialize tier engine.

        Args:
            table: Ascending (threshold, name) pairs

        Raises:
            ConfigurationError: If the table is invalid
        """
        self.table: tuple[TierConfig, ...] = build_tier_table(table)

    def tier_name(self, index: int) -> str:
        """Display name for a tier index (0 = unranked)."""
        return tier_name(self.table, index)

    def evaluate(self, account: StakerAccount) -> list[int]:
        """
        Promote account for every threshold its rewards have reached.

        Every threshold between the current tier and the number of
        thresholds reached counts as its own crossing.

        Args:
            account: Staker account (mutated in place)

        Returns:
            Zero-based indices of newly crossed tiers, ascending
        """
        reached = tiers_reached(self.table, account.rewards_earned)
        crossed = list(range(account.current_tier, reached))
        if crossed:
            account.current_tier = reached
            logger.info(
                "Tier promotion",
                extra={
                    "account": account.account,
                    "crossed": crossed,
                    "current_tier": account.current_tier,
                    "rewards_earned": account.rewards_earned,
                },
            )

        return crossed

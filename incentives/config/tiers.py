"""
Tier table configuration.

Ascending reward-volume milestones. A tier is reached once cumulative
harvested rewards meet its threshold; tiers are indexed from 1 and tier 0
means no threshold reached yet.
"""

from collections.abc import Iterable, Sequence
from typing import NamedTuple

from incentives.config.business_constants import TOKEN_UNIT, UNRANKED_TIER_NAME
from incentives.utils.exceptions import ConfigurationError, IndexOutOfRange


class TierConfig(NamedTuple):
    """Single tier milestone."""

    threshold: int  # Cumulative rewards required, base units
    name: str  # Display name


DEFAULT_TIER_TABLE: tuple[TierConfig, ...] = (
    TierConfig(threshold=1_000 * TOKEN_UNIT, name="Bronze"),
    TierConfig(threshold=5_000 * TOKEN_UNIT, name="Silver"),
    TierConfig(threshold=10_000 * TOKEN_UNIT, name="Gold"),
)


def build_tier_table(
    entries: Iterable[tuple[int, str]],
) -> tuple[TierConfig, ...]:
    """
    Build a validated, immutable tier table.

    Args:
        entries: (threshold, name) pairs

    Returns:
        Tuple of TierConfig in the given order

    Raises:
        ConfigurationError: If the table is empty, a threshold is not a
            positive integer, or thresholds are not strictly ascending
    """
    table = tuple(TierConfig(int(threshold), str(name)) for threshold, name in entries)

    if not table:
        raise ConfigurationError("Tier table must contain at least one tier")

    previous = 0
    for tier in table:
        if tier.threshold <= previous:
            raise ConfigurationError(
                f"Tier thresholds must be positive and strictly ascending: "
                f"{tier.name} ({tier.threshold}) after {previous}"
            )
        if not tier.name:
            raise ConfigurationError("Tier name cannot be empty")
        previous = tier.threshold

    return table


def tier_name(table: Sequence[TierConfig], index: int) -> str:
    """
    Get display name for a tier index.

    Args:
        table: Tier table
        index: Tier index (0 = unranked, 1..len(table) = reached tiers)

    Returns:
        Tier display name

    Raises:
        IndexOutOfRange: If index is outside 0..len(table)
    """
    if index < 0 or index > len(table):
        raise IndexOutOfRange(f"Tier index {index} out of range 0..{len(table)}")
    if index == 0:
        return UNRANKED_TIER_NAME
    return table[index - 1].name


def tiers_reached(table: Sequence[TierConfig], rewards_earned: int) -> int:
    """Count thresholds reached by a cumulative rewards amount."""
    return sum(1 for tier in table if rewards_earned >= tier.threshold)

"""Enumerations shared by models and services."""

from enum import Enum


class EventType(str, Enum):
    """Observable ledger events."""

    STAKED = "staked"
    WITHDRAWN = "withdrawn"
    REWARDS_HARVESTED = "rewards_harvested"
    TIER_ACHIEVED = "tier_achieved"
    TOKEN_ISSUED = "token_issued"
    METADATA_UPDATED = "metadata_updated"
    REFERRAL_REGISTERED = "referral_registered"
    REWARDS_DISTRIBUTED = "rewards_distributed"
    AUTHORIZED_BACKEND_UPDATED = "authorized_backend_updated"
    REWARD_AMOUNTS_UPDATED = "reward_amounts_updated"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"


class TokenKind(str, Enum):
    """Kinds of non-fungible tokens issued by the ledger."""

    POSITION = "position"  # One per staker, mirrors account state
    BADGE = "badge"  # One per tier reached

"""
Incentive ledger.

Staking accrual, tier progression, representational tokens and a
cycle-safe referral forest behind a single async facade.
"""

from incentives.ledger import IncentiveLedger, UserInfo

__all__ = ["IncentiveLedger", "UserInfo"]

__version__ = "0.1.0"

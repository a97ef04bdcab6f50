"""
Referral services package.

Contains modular services for referral processing:
- graph_manager: Cycle-safe insertion into the referral forest and queries
- referral_service: Authorized registration entry point with bounties
"""

from incentives.services.referral.graph_manager import ReferralGraphManager
from incentives.services.referral.referral_service import (
    ReferralResult,
    ReferralService,
)

__all__ = [
    "ReferralGraphManager",
    "ReferralService",
    "ReferralResult",
]

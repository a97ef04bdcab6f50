"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from incentives.models.base import Base
from incentives.models.enums import EventType, TokenKind
from incentives.models.issued_token import IssuedToken
from incentives.models.ledger_event import LedgerEvent
from incentives.models.program_settings import PROGRAM_SETTINGS_ID, ProgramSettings
from incentives.models.referral_edge import ReferralEdge
from incentives.models.staker_account import StakerAccount
from incentives.models.token_balance import TokenBalance

__all__ = [
    # Base
    "Base",
    # Enums
    "EventType",
    "TokenKind",
    # Core Models
    "StakerAccount",
    "ReferralEdge",
    "IssuedToken",
    "TokenBalance",
    # System Models
    "ProgramSettings",
    "PROGRAM_SETTINGS_ID",
    "LedgerEvent",
]

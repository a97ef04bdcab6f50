"""
External collaborators.

Contracts the core consumes for fungible minting and non-fungible token
storage, plus database-backed reference implementations that join the
caller's transaction.
"""

from incentives.services.external.balance_service import BalanceLedgerService
from incentives.services.external.protocols import MintableBalance, TokenIssuer
from incentives.services.external.token_service import TokenLedgerService

__all__ = [
    "MintableBalance",
    "TokenIssuer",
    "BalanceLedgerService",
    "TokenLedgerService",
]

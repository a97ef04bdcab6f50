"""
Ledger exceptions.

Every error is terminal for the call that raised it: the surrounding
transaction rolls back and nothing is committed.
"""


class LedgerError(Exception):
    """Base class for rejected ledger operations."""

    code = "ledger_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InvalidAmount(LedgerError):
    """Amount is zero, negative or exceeds the staked balance."""

    code = "invalid_amount"


class InvalidAddress(LedgerError):
    """Identity is empty, the zero address or malformed."""

    code = "invalid_address"


class Unauthorized(LedgerError):
    """Caller does not hold the required role."""

    code = "unauthorized"


class AlreadyReferred(LedgerError):
    """Referee already has a referrer."""

    code = "already_referred"


class SelfReferral(LedgerError):
    """Referee and referrer are the same identity."""

    code = "self_referral"


class CircularReferral(LedgerError):
    """Referral would create a cycle in the referral forest."""

    code = "circular_referral"


class NoRewardsToHarvest(LedgerError):
    """No accrued rewards are pending."""

    code = "no_rewards_to_harvest"


class UnknownAccount(LedgerError):
    """Account has never staked."""

    code = "unknown_account"


class IndexOutOfRange(LedgerError):
    """Token id or tier index does not exist."""

    code = "index_out_of_range"


class ConfigurationError(LedgerError):
    """Ledger configuration is invalid."""

    code = "configuration_error"


# Rejections caused by caller input; safe to surface to clients as-is
CLIENT_ERRORS = (
    InvalidAmount,
    InvalidAddress,
    Unauthorized,
    AlreadyReferred,
    SelfReferral,
    CircularReferral,
    NoRewardsToHarvest,
    UnknownAccount,
    IndexOutOfRange,
)


def is_client_error(exc: Exception) -> bool:
    """
    Check if exception was caused by caller input.

    Args:
        exc: Exception to check

    Returns:
        True if the caller can correct the triggering condition and retry
    """
    return isinstance(exc, CLIENT_ERRORS)

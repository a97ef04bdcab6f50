"""Address and amount validation."""

from loguru import logger
from web3 import Web3

from incentives.utils.exceptions import InvalidAddress, InvalidAmount


# Zero address - treated as "no identity"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_address(address: str | None) -> tuple[bool, str | None]:
    """
    Validate an EVM identity address.

    Args:
        address: Address to validate

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_address("0x1234567890123456789012345678901234567890")
        (True, None)
        >>> validate_address("invalid")
        (False, "Address must start with 0x")
    """
    if not address or not isinstance(address, str):
        return False, "Address is empty"

    address = address.strip()

    if not address:
        return False, "Address is empty"

    if not address.startswith("0x"):
        return False, "Address must start with 0x"

    if len(address) != 42:
        return False, "Address must be 42 characters"

    try:
        int(address[2:], 16)
    except ValueError:
        return False, "Invalid address format"

    if address.lower() == ZERO_ADDRESS:
        return False, "Zero address is not a valid identity"

    # int() accepts "_" and sign prefixes; web3 is the final word
    try:
        Web3.to_checksum_address(address)
    except (ValueError, TypeError) as e:
        logger.debug(f"Address validation failed for {address}: {e}")
        return False, "Invalid address format"

    return True, None


def normalize_address(address: str | None) -> str:
    """
    Normalize address to checksum format.

    Args:
        address: Address in any case

    Returns:
        Checksummed address

    Raises:
        InvalidAddress: If address is empty, zero or malformed
    """
    is_valid, error = validate_address(address)
    if not is_valid:
        raise InvalidAddress(f"{error}: {address!r}")

    return Web3.to_checksum_address(address.strip())


def require_positive_amount(amount: int) -> int:
    """
    Validate a strictly positive integer amount.

    Raises:
        InvalidAmount: If amount is not an int or is <= 0
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if amount <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount}")
    return amount


def require_non_negative_amount(amount: int) -> int:
    """
    Validate a non-negative integer amount.

    Raises:
        InvalidAmount: If amount is not an int or is < 0
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"Amount cannot be negative, got {amount}")
    return amount

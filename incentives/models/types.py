"""
Standard type definitions for database models.

Provides consistent types for token amounts and event payloads across all
models.
"""

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator


class Uint256(TypeDecorator):
    """
    Lossless unsigned integer up to 2**256 - 1.

    Stored as a decimal string so that 18-decimal base-unit amounts survive
    backends without arbitrary precision integers (SQLite). Values are plain
    Python ints on the way in and out.
    """

    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = int(value)
        if value < 0:
            raise ValueError(f"Uint256 cannot store negative value {value}")
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


# JSON payloads: JSONB on PostgreSQL, generic JSON elsewhere
PayloadType = JSON().with_variant(JSONB(), "postgresql")

# Checksummed EVM address
AddressType = String(42)

"""Shared test constants and doubles."""

from web3 import Web3


OWNER = Web3.to_checksum_address("0x" + "0a" * 20)
BACKEND = Web3.to_checksum_address("0x" + "0b" * 20)
ALICE = Web3.to_checksum_address("0x" + "a1" * 20)
BOB = Web3.to_checksum_address("0x" + "b2" * 20)
CAROL = Web3.to_checksum_address("0x" + "c3" * 20)
DAVE = Web3.to_checksum_address("0x" + "d4" * 20)

ONE_YEAR = 31_536_000
GENESIS = 1_700_000_000


class FakeClock:
    """Controllable ledger clock."""

    def __init__(self, start: int = GENESIS) -> None:
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        self.current += seconds
        return self.current

"""
Referral graph management module.

Maintains the referee -> referrer forest. Acyclicity is enforced purely at
insertion time: the graph is acyclic before every insert and the new
referee has no outgoing edge yet, so a cycle can only appear if the
referee already sits on the referrer's ancestor chain.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.referral_edge import ReferralEdge
from incentives.repositories.referral_repository import ReferralRepository
from incentives.utils.exceptions import (
    AlreadyReferred,
    CircularReferral,
    SelfReferral,
)
from incentives.utils.validation import normalize_address


class ReferralGraphManager:
    """Manages referral forest operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize graph manager."""
        self.session = session
        self.referral_repo = ReferralRepository(session)

    async def get_referral_chain(self, account: str) -> list[str]:
        """
        Get ancestor chain of an account.

        Args:
            account: Checksummed address

        Returns:
            Addresses from direct referrer up to the root, nearest first

        Raises:
            CircularReferral: If stored data already contains a cycle
        """
        chain: list[str] = []
        seen = {account}

        current = await self.referral_repo.get_referrer_of(account)
        while current is not None:
            if current in seen:
                raise CircularReferral(
                    f"Stored referral chain of {account} loops at {current}"
                )
            seen.add(current)
            chain.append(current)
            current = await self.referral_repo.get_referrer_of(current)

        return chain

    async def register(
        self, referee: str, referrer: str, now: int
    ) -> ReferralEdge:
        """
        Insert a referee -> referrer edge.

        Args:
            referee: Identity being referred
            referrer: Identity credited with the referral
            now: Ledger time of registration

        Returns:
            Created edge

        Raises:
            InvalidAddress: If either identity is empty, zero or malformed
            SelfReferral: If referee == referrer
            AlreadyReferred: If referee already has a referrer
            CircularReferral: If referee is an ancestor of referrer
        """
        referee = normalize_address(referee)
        referrer = normalize_address(referrer)

        if referee == referrer:
            raise SelfReferral(f"{referee} cannot refer itself")

        if await self.referral_repo.get_referrer_of(referee) is not None:
            raise AlreadyReferred(f"{referee} already has a referrer")

        # Walk from referrer to its root; referee must not be upstream
        current: str | None = referrer
        steps = 0
        while current is not None:
            if current == referee:
                logger.warning(
                    "Referral loop detected",
                    extra={
                        "referee": referee,
                        "referrer": referrer,
                        "depth": steps,
                    },
                )
                raise CircularReferral(
                    f"{referee} is an ancestor of {referrer}"
                )
            current = await self.referral_repo.get_referrer_of(current)
            steps += 1

        edge = await self.referral_repo.create(
            referee=referee, referrer=referrer, registered_at=now
        )

        logger.info(
            "Referral edge created",
            extra={"referee": referee, "referrer": referrer, "chain_length": steps},
        )

        return edge

    async def get_referrer(self, referee: str) -> str | None:
        """Get referrer of an identity, or None if unassigned."""
        return await self.referral_repo.get_referrer_of(normalize_address(referee))

    async def list_children(self, referrer: str) -> list[str]:
        """Get direct referees in registration order."""
        return await self.referral_repo.get_children(normalize_address(referrer))

    async def count_children(self, referrer: str) -> int:
        """Count direct referees."""
        return await self.referral_repo.count_children(normalize_address(referrer))

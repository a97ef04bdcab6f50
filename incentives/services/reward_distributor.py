"""
Reward distributor.

Stateless fixed-amount minting of referral bounties. Amounts are decided by
the administrative settings, never by the distributor.
"""

from loguru import logger

from incentives.services.external.protocols import MintableBalance


class RewardDistributor:
    """Mints referral bounties through the external balance service."""

    def __init__(self, balance_service: MintableBalance) -> None:
        """
        Initialize distributor.

        Args:
            balance_service: Mintable reward token
        """
        self.balance_service = balance_service

    async def distribute(
        self,
        referee: str,
        referrer: str,
        referee_bounty: int,
        referrer_bounty: int,
    ) -> tuple[int, int]:
        """
        Mint both bounties as two independent mints.

        A zero bounty skips its mint.

        Args:
            referee: Referred identity
            referrer: Referring identity
            referee_bounty: Amount for the referee
            referrer_bounty: Amount for the referrer

        Returns:
            Tuple of (referrer_amount_minted, referee_amount_minted)
        """
        if referrer_bounty > 0:
            await self.balance_service.mint(referrer, referrer_bounty)
        if referee_bounty > 0:
            await self.balance_service.mint(referee, referee_bounty)

        logger.info(
            "Referral bounties distributed",
            extra={
                "referrer": referrer,
                "referee": referee,
                "referrer_bounty": referrer_bounty,
                "referee_bounty": referee_bounty,
            },
        )

        return referrer_bounty, referee_bounty

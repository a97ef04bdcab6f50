"""
Business constants.

Single source of truth for the fixed numbers of the incentive program.
Runtime-tunable values live in settings; these never change without a
code release.
"""

# Reward token decimals (base units per whole token)
TOKEN_DECIMALS = 18
TOKEN_UNIT = 10**TOKEN_DECIMALS

# Linear reward rate: RATE / RATE_DENOMINATOR per year (10% APR)
REWARD_RATE = 10
REWARD_RATE_DENOMINATOR = 100
SECONDS_PER_YEAR = 31_536_000

# Referral bounties minted on every successful registration
DEFAULT_REFERRER_REWARD = 50 * TOKEN_UNIT
DEFAULT_REFEREE_REWARD = 25 * TOKEN_UNIT

# Label used in metadata before the first threshold is reached
UNRANKED_TIER_NAME = "Unranked"

# Representational token metadata
DEFAULT_TOKEN_NAME = "Staking Position"
DEFAULT_TOKEN_SYMBOL = "STAKE"

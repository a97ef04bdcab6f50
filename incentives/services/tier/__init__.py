"""Tier progression package."""

from incentives.services.tier.tier_progression import TierProgressionEngine

__all__ = ["TierProgressionEngine"]

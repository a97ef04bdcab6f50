"""Reward accrual package."""

from incentives.services.accrual.reward_accrual import RewardAccrualEngine

__all__ = ["RewardAccrualEngine"]

"""
Base service class.

Provides common functionality for all service classes including session
management, logging, and the transaction decorator.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from incentives.utils.exceptions import is_client_error


# Type variable for generic decorator return types
T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Provides common functionality for all service classes:
    - Session management
    - Logging with bound service context
    - Transaction helpers
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decorator to wrap method in transaction with automatic commit/rollback.

    Commits on success, rolls back on exception and re-raises. Rejections
    caused by caller input are logged at WARNING, anything else at ERROR
    with traceback.

    Usage:
        @transaction
        async def my_service_method(self, ...):
            # Your code here
            pass

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> T:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except Exception as e:
            await self.rollback()
            if is_client_error(e):
                self.logger.warning(
                    f"Rejected {func.__name__}: {e}",
                    extra={
                        "error": type(e).__name__,
                        "function": func.__name__,
                    },
                )
            else:
                self.logger.error(
                    f"Transaction failed in {func.__name__}",
                    extra={
                        "error": str(e),
                        "function": func.__name__,
                    },
                    exc_info=True,
                )
            raise

    return wrapper

"""
After School Lessons Backend — Repository Base
================================================

What:  Shared plumbing for the store façades: the injected session, the
       per-operation timeout, and the driver-error → StoreUnavailableError
       translation.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from afterschool.config import settings
from afterschool.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository:
    """
    Holds the session for one unit of work.

    Args:
        session: AsyncSession owned by the caller (request dependency or CLI).
        timeout: Seconds a single operation may take before it is reported
                 as StoreUnavailableError. Defaults to STORE_TIMEOUT_SECONDS.
    """

    def __init__(self, session: AsyncSession, timeout: Optional[float] = None):
        self.session = session
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        """
        Await a store call under the timeout.

        Raises:
            StoreUnavailableError: the driver raised, the connection was
                                   lost, or the timeout elapsed.
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Store operation '%s' timed out after %.1fs", operation, self.timeout)
            raise StoreUnavailableError(
                context={"operation": operation, "error_type": "TimeoutError"},
            ) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("Store operation '%s' failed: %s", operation, str(e), exc_info=True)
            raise StoreUnavailableError(
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e

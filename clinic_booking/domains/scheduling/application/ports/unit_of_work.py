"""
Unit of Work Port
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Transaction boundary for use cases.

    Example:
        ```python
        async with uow.transaction():
            await schedule_repo.add(entry)
            await schedule_repo.add(other)
        # both rows committed, or neither
        ```
    """

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Commit on normal exit, roll back when the block raises."""
        ...

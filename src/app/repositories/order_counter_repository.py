"""Order Counter Repository Interface

Defines the contract for the atomic per-year order number sequence.
"""

from abc import ABC, abstractmethod
from typing import Optional


class OrderCounterRepository(ABC):
    """
    Repository interface for OrderCounter persistence

    Increments are single-row atomic updates. Callers never read the last
    value and write it back.
    """

    @abstractmethod
    async def increment(self, year: int) -> Optional[int]:
        """
        Atomically increment and return the sequence for a year

        Args:
            year: Calendar year

        Returns:
            The newly reserved sequence, or None if no counter exists yet
        """
        pass

    @abstractmethod
    async def initialize(self, year: int, first_sequence: int) -> int:
        """
        Create the counter for a year and reserve first_sequence

        If another writer created the counter concurrently, the existing
        counter wins and the next sequence from it is reserved instead.

        Args:
            year: Calendar year
            first_sequence: Sequence to reserve when the counter is new

        Returns:
            The reserved sequence
        """
        pass

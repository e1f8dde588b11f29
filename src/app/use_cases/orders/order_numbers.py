"""Order number allocation

Sequences come from the per-year OrderCounter via an atomic increment.
The counter is seeded from the highest existing order number the first
time a year is used.
"""

from src.app.repositories.order_counter_repository import OrderCounterRepository
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import format_order_number


async def allocate_order_number(
    year: int,
    order_repo: OrderRepository,
    counter_repo: OrderCounterRepository,
) -> str:
    """
    Reserve the next order number for a year

    Runs inside the caller's unit of work; rolling it back releases the
    reservation on stores that support it.

    Returns:
        Order number string (e.g., ORD-2024-00042)
    """
    sequence = await counter_repo.increment(year)
    if sequence is None:
        last_sequence = await order_repo.get_last_order_sequence(year)
        sequence = await counter_repo.initialize(year, last_sequence + 1)
    return format_order_number(year, sequence)

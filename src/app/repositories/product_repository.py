"""Product Repository Interface

Read-only catalog access used to snapshot prices and check availability.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.product import Product


class ProductRepository(ABC):

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """
        Retrieve product by ID

        Args:
            product_id: Product ID

        Returns:
            Product if found, None otherwise
        """
        pass

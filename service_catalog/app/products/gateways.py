"""
Contracts for the external collaborators of the product handlers.

The Postgres, Redis and Kafka adapters implement these, as do the in-memory
doubles in ``shared.test_helpers``.
"""

from typing import Optional, Protocol

from .models import Product


class Gateway(Protocol):
    """Lifecycle shared by every external collaborator."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def health_check(self) -> bool: ...


class ProductStore(Gateway, Protocol):
    """Document collection of products keyed by identity."""

    async def insert(self, product: Product) -> Product:
        """Persist a new product, assigning its identity."""

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Return the product or None."""

    async def replace(self, product: Product) -> None:
        """Replace the stored document of an existing product."""

    async def delete(self, product_id: str) -> None:
        """Physically remove a product."""


class ProductCache(Gateway, Protocol):
    """String cache keyed by product identity."""

    async def get(self, product_id: str) -> Optional[str]:
        """Return the cached value or None."""

    async def set(self, product_id: str, value: str) -> None:
        """Store a value for the product."""

    async def remove(self, product_id: str) -> None:
        """Drop the cached value, if any."""


class ProductNotifier(Gateway, Protocol):
    """Best-effort publisher of product events."""

    async def send_product_created(self, product: Product) -> bool:
        """Publish a creation message; False when delivery failed."""

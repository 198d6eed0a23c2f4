"""
Product service for Catalog Service.
"""

from typing import Optional

from .gateways import ProductStore
from .models import Product


class ProductService:
    """Pass-through from the handlers to the product store."""

    def __init__(self, store: ProductStore):
        self.store = store

    async def create_product(self, product: Product) -> Product:
        return await self.store.insert(product)

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return await self.store.find_by_id(product_id)

    async def update_product(self, product: Product) -> None:
        await self.store.replace(product)

    async def delete_product(self, product_id: str) -> None:
        await self.store.delete(product_id)

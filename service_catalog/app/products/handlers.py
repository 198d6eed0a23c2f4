"""
Product request handlers for Catalog Service.

Each operation sequences the store, the read-through cache and the
notification queue:

- get: cache first, then the store; a store hit populates the cache.
- create: store, then a best-effort notification. The cache is untouched.
- update/delete: store, then unconditional removal of the cache entry.
"""

from typing import Optional

from shared.errors import NotFoundError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .gateways import ProductCache, ProductNotifier
from .models import CreateResult, CreateStatus, Product, ProductRequest, ProductResponse, utcnow
from .service import ProductService


class ProductHandler:
    """Orchestrates product operations around cache and queue."""

    def __init__(
        self,
        service: ProductService,
        cache: ProductCache,
        notifier: ProductNotifier,
        metrics: Optional[MetricsCollector] = None
    ):
        self.service = service
        self.cache = cache
        self.notifier = notifier
        self.metrics = metrics
        self.logger = get_logger("catalog.handlers")

    async def get_product(self, product_id: str) -> ProductResponse:
        """Get a product, reading through the cache."""
        cached = await self.cache.get(product_id)
        if cached is not None:
            self._count("cache_hits_total", cache_type="product")
            self.logger.info("Product found in cache", product_id=product_id)
            return ProductResponse.model_validate_json(cached)

        self._count("cache_misses_total", cache_type="product")

        product = await self.service.get_product_by_id(product_id)
        if product is None:
            self.logger.warning("Product not found", product_id=product_id)
            raise NotFoundError("Product", product_id)

        response = ProductResponse.from_product(product)
        await self.cache.set(product_id, response.model_dump_json())

        self.logger.info("Product loaded from store and cached", product_id=product_id)
        return response

    async def create_product(self, request: ProductRequest) -> CreateResult:
        """Persist a new product and announce it on the queue."""
        product = Product(
            name=request.name,
            description=request.description,
            price=request.price
        )

        product = await self.service.create_product(product)
        self._count("product_operations_total", operation="create")

        delivered = await self.notifier.send_product_created(product)
        if delivered:
            self._count("notifications_total", status="sent")
            self.logger.info("Product created and notification sent", product_id=product.product_id)
            return CreateResult(product=product, status=CreateStatus.PERSISTED_AND_NOTIFIED)

        self._count("notifications_total", status="failed")
        self.logger.warning(
            "Product created but notification failed",
            product_id=product.product_id
        )
        return CreateResult(product=product, status=CreateStatus.PERSISTED_ONLY)

    async def update_product(self, product_id: str, request: ProductRequest) -> ProductResponse:
        """Overwrite a product's fields and invalidate its cache entry."""
        product = await self.service.get_product_by_id(product_id)
        if product is None:
            self.logger.warning("Product not found", product_id=product_id)
            raise NotFoundError("Product", product_id)

        product.name = request.name
        product.description = request.description
        product.price = request.price
        product.updated_date = utcnow()

        await self.service.update_product(product)
        self._count("product_operations_total", operation="update")
        self.logger.info("Product updated", product_id=product_id)

        await self._invalidate(product_id, reason="update")

        return ProductResponse.from_product(product)

    async def delete_product(self, product_id: str) -> None:
        """Remove a product from the store and invalidate its cache entry."""
        product = await self.service.get_product_by_id(product_id)
        if product is None:
            self.logger.warning("Product not found", product_id=product_id)
            raise NotFoundError("Product", product_id)

        await self.service.delete_product(product_id)
        self._count("product_operations_total", operation="delete")
        self.logger.info("Product deleted", product_id=product_id)

        await self._invalidate(product_id, reason="delete")

    async def _invalidate(self, product_id: str, reason: str):
        await self.cache.remove(product_id)
        self._count("cache_invalidations_total", cache_type="product", reason=reason)

    def _count(self, metric_name: str, **labels):
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)

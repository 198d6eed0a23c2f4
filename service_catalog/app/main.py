"""
Catalog service for the Product Catalog.
"""

from typing import Optional

from fastapi.responses import JSONResponse
from shared.base_service import BaseService
from shared.errors import CatalogException, ServiceError

from .products.gateways import ProductStore, ProductCache, ProductNotifier
from .products.handlers import ProductHandler
from .products.models import (
    ProductRequest, ProductResponse, ProductCreatedResponse,
    ProductUpdatedResponse, ProductDeletedResponse
)
from .products.service import ProductService
from .persistence.postgres import PostgreSQLProductStore
from .cache.redis_cache import RedisProductCache
from .messaging.producer import ProductEventProducer


NOTIFICATION_FAILED_MESSAGE = "Product saved, but the creation notification could not be delivered"


class CatalogService(BaseService):
    """Catalog service implementation.

    Gateways are built from configuration unless passed in.
    """

    def __init__(
        self,
        store: Optional[ProductStore] = None,
        cache: Optional[ProductCache] = None,
        notifier: Optional[ProductNotifier] = None
    ):
        super().__init__("catalog", 8020)

        self.store = store or PostgreSQLProductStore(
            self.config.postgres_dsn,
            command_timeout=self.config.store_timeout_seconds,
            min_size=self.config.store_pool_min_size,
            max_size=self.config.store_pool_max_size
        )
        self.cache = cache or RedisProductCache(
            self.config.redis_url,
            key_prefix=self.config.cache_key_prefix,
            ttl_seconds=self.config.cache_ttl_seconds,
            timeout_seconds=self.config.cache_timeout_seconds
        )
        self.notifier = notifier or ProductEventProducer(
            self.config.kafka_bootstrap,
            self.config.product_events_topic,
            timeout_seconds=self.config.queue_timeout_seconds
        )

        self.product_service = ProductService(self.store)
        self.handler = ProductHandler(self.product_service, self.cache, self.notifier, self.metrics)

        self._setup_product_routes()

    def _setup_product_routes(self):
        """Set up product routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "catalog",
                "message": "Product Catalog - Catalog Service",
                "version": "1.0.0",
                "capabilities": ["persistence", "caching", "notifications"]
            }

        @self.app.post("/products", response_model=ProductResponse)
        async def create_product(request: ProductRequest):
            """Create a product.

            Answers 202 with a message when the product was saved but its
            notification was not delivered.
            """
            try:
                result = await self.handler.create_product(request)
                product = ProductResponse.from_product(result.product)

                if result.notified:
                    self.metrics.record_business_event("product_created")
                    return product

                self.metrics.record_business_event("product_created_unnotified")
                body = ProductCreatedResponse(product=product, message=NOTIFICATION_FAILED_MESSAGE)
                return JSONResponse(status_code=202, content=body.model_dump(mode="json"))

            except CatalogException:
                raise
            except Exception as e:
                self.logger.error("Error creating product", error=str(e), exc_info=e)
                raise ServiceError("Error creating product") from e

        @self.app.get("/products/{product_id}", response_model=ProductResponse)
        async def get_product(product_id: str):
            """Get a product by ID."""
            try:
                return await self.handler.get_product(product_id)

            except CatalogException:
                raise
            except Exception as e:
                self.logger.error("Error getting product", product_id=product_id, error=str(e), exc_info=e)
                raise ServiceError("Error getting product") from e

        @self.app.put("/products/{product_id}", response_model=ProductUpdatedResponse)
        async def update_product(product_id: str, request: ProductRequest):
            """Update an existing product."""
            try:
                product = await self.handler.update_product(product_id, request)
                return ProductUpdatedResponse(
                    message=f"Product {product_id} updated successfully",
                    product=product
                )

            except CatalogException:
                raise
            except Exception as e:
                self.logger.error("Error updating product", product_id=product_id, error=str(e), exc_info=e)
                raise ServiceError("Error updating product") from e

        @self.app.delete("/products/{product_id}/logical", response_model=ProductDeletedResponse)
        async def delete_product(product_id: str):
            """Delete a product."""
            try:
                await self.handler.delete_product(product_id)
                return ProductDeletedResponse(message=f"Product {product_id} deleted successfully")

            except CatalogException:
                raise
            except Exception as e:
                self.logger.error("Error deleting product", product_id=product_id, error=str(e), exc_info=e)
                raise ServiceError("Error deleting product") from e

    async def _check_dependencies(self):
        """Check catalog service dependencies."""
        dependencies = {}

        for name, component in (("postgres", self.store), ("redis", self.cache), ("kafka", self.notifier)):
            try:
                if await component.health_check():
                    dependencies[name] = "ok"
                else:
                    dependencies[name] = "error"
            except Exception:
                dependencies[name] = "error"

        return dependencies

    async def start(self):
        """Start catalog service components."""
        await self.store.start()
        await self.cache.start()
        await self.notifier.start()

        self.logger.info("Catalog service started")

    async def stop(self):
        """Stop catalog service components."""
        await self.notifier.stop()
        await self.cache.stop()
        await self.store.stop()

        self.logger.info("Catalog service stopped")


def create_app(
    store: Optional[ProductStore] = None,
    cache: Optional[ProductCache] = None,
    notifier: Optional[ProductNotifier] = None
):
    """Create catalog service application."""
    service = CatalogService(store=store, cache=cache, notifier=notifier)
    return service.app


if __name__ == "__main__":
    service = CatalogService()
    service.run()

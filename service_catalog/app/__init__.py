"""
Catalog Service package for the Product Catalog.

This package manages catalog products and keeps their read path fast.
It provides:

- app.main: API surface for product CRUD, health and metrics.
- app.products: Product model, gateway contracts, service and handlers.
- app.persistence: PostgreSQL document collection for products.
- app.cache: Redis-backed read-through cache of serialized products.
- app.messaging: Kafka publisher for product creation events.

Guidelines:
- The service is stateless; rely on external store/cache/queue.
- The store is the source of truth; every write drops the cached copy.
- Notifications are best-effort and never fail a persisted create.
"""

"""
Unit tests for Catalog main service.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from service_catalog.app.main import CatalogService, NOTIFICATION_FAILED_MESSAGE, create_app
from service_catalog.app.persistence.postgres import PostgreSQLProductStore
from service_catalog.app.cache.redis_cache import RedisProductCache
from service_catalog.app.messaging.producer import ProductEventProducer
from shared.errors import ExternalServiceError
from shared.test_helpers import (
    InMemoryProductStore, InMemoryProductCache, RecordingNotifier, CatalogDataFactory
)


class TestCatalogService:
    """Test cases for CatalogService."""

    @pytest.fixture
    def store(self):
        return InMemoryProductStore()

    @pytest.fixture
    def cache(self):
        return InMemoryProductCache()

    @pytest.fixture
    def notifier(self):
        return RecordingNotifier()

    @pytest.fixture
    def catalog_service(self, store, cache, notifier):
        """Create CatalogService wired to in-memory gateways."""
        return CatalogService(store=store, cache=cache, notifier=notifier)

    @pytest.fixture
    def client(self, catalog_service):
        """Create test client."""
        return TestClient(catalog_service.app)

    @pytest.fixture
    def product_request(self):
        return CatalogDataFactory.create_product_request()

    def _create(self, client, body):
        response = client.post("/products", json=body)
        assert response.status_code == 200
        return response.json()

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "catalog"
        assert "caching" in data["capabilities"]
        assert "notifications" in data["capabilities"]

    def test_service_initialization_defaults(self):
        """Without injected gateways the service builds the real adapters."""
        service = CatalogService()
        assert isinstance(service.store, PostgreSQLProductStore)
        assert isinstance(service.cache, RedisProductCache)
        assert isinstance(service.notifier, ProductEventProducer)
        assert service.cache.key_prefix == "ProductCache_"
        assert service.cache.ttl_seconds is None

    def test_create_app(self, store, cache, notifier, product_request):
        """create_app wires injected gateways into a ready application."""
        client = TestClient(create_app(store=store, cache=cache, notifier=notifier))

        response = client.post("/products", json=product_request)

        assert response.status_code == 200
        assert response.json()["id"] in store.documents

    def test_health_endpoint(self, client):
        """Test health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "catalog"
        assert data["status"] == "ok"
        assert data["dependencies"] == {"postgres": "ok", "redis": "ok", "kafka": "ok"}

    def test_health_endpoint_degraded(self, client, notifier):
        """A failing dependency shows up in the health report."""
        notifier.deliver = False
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["dependencies"]["kafka"] == "error"

    def test_metrics_endpoint(self, client, product_request):
        """Prometheus exposition includes catalog counters."""
        self._create(client, product_request)
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "notifications_total" in response.text
        assert "http_requests_total" in response.text

    def test_metrics_label_by_route_template(self, catalog_service, client):
        """Requests for different products share one series per route."""
        client.get("/products/first")
        client.get("/products/second")

        registry = catalog_service.metrics.registry
        labels = {"method": "GET", "endpoint": "/products/{product_id}", "status_code": "404"}
        assert registry.get_sample_value("http_requests_total", labels) == 2.0

        endpoints = {
            sample.labels["endpoint"]
            for metric in registry.collect() if metric.name == "http_requests"
            for sample in metric.samples
        }
        assert "/products/first" not in endpoints
        assert "/products/second" not in endpoints

    def test_create_product(self, client, product_request):
        """Test creating a product."""
        response = client.post("/products", json=product_request)

        assert response.status_code == 200
        data = response.json()
        assert data["id"]
        assert data["name"] == "Widget"
        assert data["description"] == "A widget"
        assert data["price"] == 9.99
        assert data["created_date"]
        assert data["updated_date"] is None
        assert data["is_logical_deleted"] is False

    def test_create_product_ignores_client_identity(self, client, store):
        """Identity comes from the store, never the request body."""
        response = client.post("/products", json={"id": "chosen", "name": "Widget", "price": 1})

        assert response.status_code == 200
        assert response.json()["id"] != "chosen"
        assert "chosen" not in store.documents

    def test_create_product_notification_failed(self, client, store, notifier, product_request):
        """Unacknowledged notifications answer 202 and keep the product."""
        notifier.deliver = False

        response = client.post("/products", json=product_request)

        assert response.status_code == 202
        data = response.json()
        assert data["message"] == NOTIFICATION_FAILED_MESSAGE
        assert data["product"]["name"] == "Widget"
        assert data["product"]["price"] == 9.99

        product_id = data["product"]["id"]
        assert product_id in store.documents
        assert client.get(f"/products/{product_id}").status_code == 200

    def test_create_product_null_body(self, client):
        """A null body is a validation error."""
        response = client.post(
            "/products",
            content="null",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("body", [
        {"description": "no name", "price": 1.0},
        {"name": "", "price": 1.0},
        {"name": "Widget"},
        {"name": "Widget", "price": "not-a-number"},
        {"name": "Widget", "price": "1234567890.1234567"},
    ])
    def test_create_product_invalid_body(self, client, store, body):
        """Invalid bodies are rejected before anything is stored."""
        response = client.post("/products", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert store.calls["insert"] == 0

    def test_create_product_store_failure(self, client, store, product_request):
        """Store failures surface as a generic 500."""
        store.fail_with = ExternalServiceError("postgres", "connection refused")

        response = client.post("/products", json=product_request)

        assert response.status_code == 500
        data = response.json()
        assert data["message"] == "Internal server error"
        assert "postgres" not in data["message"]
        assert data["details"] == {}

    def test_create_product_unexpected_failure(self, client, store, product_request):
        """Unexpected exceptions are converted to the same generic 500."""
        store.fail_with = RuntimeError("boom")

        response = client.post("/products", json=product_request)

        assert response.status_code == 500
        assert response.json()["code"] == "SERVICE_ERROR"
        assert response.json()["message"] == "Internal server error"

    def test_create_product_price_is_exact(self, client):
        """Prices keep every digit on the wire."""
        response = client.post("/products", content='{"name": "Widget", "price": 1234567890123.45}',
                               headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        assert '"price":1234567890123.45' in response.text

    def test_get_product(self, client, product_request):
        """Test getting a product from the store, then from the cache."""
        created = self._create(client, product_request)

        fresh = client.get(f"/products/{created['id']}")
        cached = client.get(f"/products/{created['id']}")

        assert fresh.status_code == 200
        assert cached.status_code == 200
        assert fresh.json() == created
        assert cached.json() == fresh.json()

    @pytest.mark.parametrize("product_id", ["missing", "0" * 24, "with space", "ünïcode", "a%00b"])
    def test_get_product_not_found(self, client, product_id):
        """Unknown identities are 404 for any identity string."""
        response = client.get(f"/products/{product_id}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_get_product_cache_failure(self, client, cache):
        """Cache outages are internal errors."""
        cache.fail_with = ExternalServiceError("redis", "timeout")

        response = client.get("/products/any")

        assert response.status_code == 500

    def test_update_product(self, client, product_request):
        """Test updating a product."""
        created = self._create(client, product_request)

        response = client.put(
            f"/products/{created['id']}",
            json={"name": "Widget v2", "price": 12.50}
        )

        assert response.status_code == 200
        data = response.json()
        assert created["id"] in data["message"]
        assert data["product"]["name"] == "Widget v2"
        assert data["product"]["price"] == 12.5
        assert data["product"]["description"] is None
        assert data["product"]["updated_date"] is not None

    def test_update_product_invalidates_cache(self, client, store, cache, product_request):
        """A read after an update goes back to the store."""
        created = self._create(client, product_request)
        client.get(f"/products/{created['id']}")
        assert created["id"] in cache.entries

        client.put(f"/products/{created['id']}", json={"name": "Widget v2", "price": 12.50})
        assert created["id"] not in cache.entries
        finds = store.calls["find_by_id"]

        response = client.get(f"/products/{created['id']}")

        assert store.calls["find_by_id"] == finds + 1
        assert response.json()["name"] == "Widget v2"

    def test_update_product_not_found(self, client, product_request):
        """Test updating a missing product."""
        response = client.put("/products/missing", json=product_request)
        assert response.status_code == 404

    def test_update_product_null_body(self, client, product_request):
        """A null update body is a validation error."""
        created = self._create(client, product_request)

        response = client.put(
            f"/products/{created['id']}",
            content="null",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400

    def test_delete_product(self, client, store, product_request):
        """Test deleting a product."""
        created = self._create(client, product_request)

        response = client.delete(f"/products/{created['id']}/logical")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert created["id"] in data["message"]
        assert created["id"] not in store.documents
        assert client.get(f"/products/{created['id']}").status_code == 404

    def test_delete_product_not_found(self, client):
        """Test deleting a missing product."""
        response = client.delete("/products/missing/logical")
        assert response.status_code == 404

    def test_request_id_header(self, client):
        """The request ID is echoed back."""
        response = client.get("/", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_error_carries_request_id(self, client):
        """Error bodies carry the request ID for correlation."""
        response = client.get("/products/missing", headers={"X-Request-ID": "req-404"})
        assert response.json()["request_id"] == "req-404"

    def test_lifespan_starts_and_stops_gateways(self, catalog_service, store):
        """Gateways are started with the app and stopped on shutdown."""
        with TestClient(catalog_service.app):
            assert store.started is True
        assert store.started is False

    @pytest.mark.asyncio
    async def test_start_starts_default_gateways(self):
        """Default gateways are all started."""
        service = CatalogService()

        with patch.object(PostgreSQLProductStore, "start", new_callable=AsyncMock) as mock_store_start, \
                patch.object(RedisProductCache, "start", new_callable=AsyncMock) as mock_cache_start, \
                patch.object(ProductEventProducer, "start", new_callable=AsyncMock) as mock_producer_start:
            await service.start()

        mock_store_start.assert_awaited_once()
        mock_cache_start.assert_awaited_once()
        mock_producer_start.assert_awaited_once()

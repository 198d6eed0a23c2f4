"""
Shared utilities for the Product Catalog services.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service scaffolding (middleware, health, errors)
- test_helpers: In-memory gateway doubles and test data

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/
"""

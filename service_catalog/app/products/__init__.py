"""
Product domain for Catalog Service: models, gateway contracts, the
pass-through service and the request handlers.
"""

from .models import (
    Product, ProductRequest, ProductResponse, CreateResult, CreateStatus
)
from .service import ProductService
from .handlers import ProductHandler

__all__ = [
    "Product",
    "ProductRequest",
    "ProductResponse",
    "CreateResult",
    "CreateStatus",
    "ProductService",
    "ProductHandler",
]

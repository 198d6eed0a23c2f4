"""
Cache package for Catalog Service.

Provides a Redis-backed read-through cache of serialized products.
"""

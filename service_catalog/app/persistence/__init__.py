"""
Persistence package for Catalog Service.

Provides the PostgreSQL-backed product document collection.
"""

"""
Messaging package for Catalog Service: Kafka publisher for product events.
"""

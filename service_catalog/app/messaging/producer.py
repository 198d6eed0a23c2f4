"""
Kafka producer for Catalog Service product events.
"""

import asyncio
import json
import time
from typing import Dict, Any, Optional
from kafka import KafkaProducer
from kafka.errors import KafkaError

from shared.logging import get_logger
from shared.errors import ExternalServiceError
from ..products.models import Product


class ProductEventProducer:
    """Publishes product events to Kafka.

    Delivery failures come back as False instead of being raised, so
    callers can treat notifications as best-effort.
    """

    def __init__(self, bootstrap_servers: str, topic: str, timeout_seconds: float = 10.0):
        self.bootstrap_servers = bootstrap_servers
        self.topic = topic
        self.timeout_seconds = timeout_seconds
        self.logger = get_logger("catalog.kafka.producer")
        self.producer: Optional[KafkaProducer] = None

    async def start(self):
        """Start the Kafka producer."""
        try:
            self.producer = KafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                value_serializer=lambda x: json.dumps(x).encode('utf-8'),
                key_serializer=lambda x: x.encode('utf-8') if x else None,
                acks='all',
                retries=0,
                linger_ms=0,
                max_block_ms=int(self.timeout_seconds * 1000),
                request_timeout_ms=int(self.timeout_seconds * 1000)
            )

            self.logger.info("Kafka producer started", topic=self.topic)

        except Exception as e:
            self.logger.error("Failed to start Kafka producer", error=str(e))
            raise ExternalServiceError("kafka", str(e)) from e

    async def stop(self):
        """Stop the Kafka producer."""
        if self.producer:
            await asyncio.to_thread(self.producer.flush, self.timeout_seconds)
            await asyncio.to_thread(self.producer.close, self.timeout_seconds)
            self.logger.info("Kafka producer stopped")

    async def send_message(
        self,
        message: Dict[str, Any],
        key: Optional[str] = None,
        topic: Optional[str] = None
    ) -> bool:
        """Send a message and wait for the broker acknowledgement."""
        topic = topic or self.topic
        if not self.producer:
            self.logger.error("Kafka producer not started", topic=topic)
            return False

        try:
            # send() may block on metadata and get() on the ack; both stay off the event loop
            record_metadata = await asyncio.to_thread(self._send_and_wait, topic, message, key)

            self.logger.info(
                "Message sent successfully",
                topic=topic,
                partition=record_metadata.partition,
                offset=record_metadata.offset
            )
            return True

        except KafkaError as e:
            self.logger.error("Kafka error sending message", topic=topic, error=str(e))
            return False

        except Exception as e:
            self.logger.error("Error sending message", topic=topic, error=str(e))
            return False

    def _send_and_wait(self, topic: str, message: Dict[str, Any], key: Optional[str]):
        future = self.producer.send(topic=topic, value=message, key=key)
        return future.get(timeout=self.timeout_seconds)

    async def send_product_created(self, product: Product) -> bool:
        """Announce a newly created product."""
        message = {
            "event_type": "product_created",
            "product_id": product.product_id,
            "message": f"New product added: {product}",
            "timestamp": int(time.time() * 1000)
        }

        return await self.send_message(message, key=product.product_id)

    async def health_check(self) -> bool:
        """Check broker connectivity."""
        return bool(self.producer and self.producer.bootstrap_connected())

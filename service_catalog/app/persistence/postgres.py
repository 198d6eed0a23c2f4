"""
PostgreSQL persistence layer for Catalog Service.

Products are kept as a document collection: one JSONB document per row,
keyed by the product identity.
"""

import json
import uuid
from typing import Optional

import asyncpg
from shared.logging import get_logger
from shared.errors import ExternalServiceError
from ..products.models import Product


class PostgreSQLProductStore:
    """Product document collection on PostgreSQL."""

    def __init__(
        self,
        dsn: str,
        command_timeout: float = 30.0,
        min_size: int = 2,
        max_size: int = 10
    ):
        self.dsn = dsn
        self.command_timeout = command_timeout
        self.min_size = min_size
        self.max_size = max_size
        self.logger = get_logger("catalog.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            await self._create_tables()

            self.logger.info("PostgreSQL product store started")

        except Exception as e:
            self.logger.error("Failed to start PostgreSQL product store", error=str(e))
            raise ExternalServiceError("postgres", str(e)) from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.logger.info("PostgreSQL product store stopped")

    async def _create_tables(self):
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS products (
                    product_id VARCHAR(64) PRIMARY KEY,
                    document JSONB NOT NULL
                );
            """)

    async def insert(self, product: Product) -> Product:
        """Insert a new product document and assign its identity."""
        product_id = uuid.uuid4().hex
        try:
            async with self.pool.acquire() as conn:
                await conn.execute("""
                    INSERT INTO products (product_id, document) VALUES ($1, $2::jsonb)
                """, product_id, json.dumps(product.to_document()))
        except Exception as e:
            self.logger.error("Error inserting product", name=product.name, error=str(e))
            raise ExternalServiceError("postgres", str(e)) from e

        product.product_id = product_id
        self.logger.info("Product inserted", product_id=product_id)
        return product

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Load a product by identity."""
        # PostgreSQL text cannot hold NUL, so no stored product can match
        if "\x00" in product_id:
            return None

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow("""
                    SELECT product_id, document FROM products WHERE product_id = $1
                """, product_id)
        except Exception as e:
            self.logger.error("Error loading product", product_id=product_id, error=str(e))
            raise ExternalServiceError("postgres", str(e)) from e

        if not row:
            return None

        return self._row_to_product(row)

    async def replace(self, product: Product) -> None:
        """Replace the stored document of a product."""
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute("""
                    UPDATE products SET document = $2::jsonb WHERE product_id = $1
                """, product.product_id, json.dumps(product.to_document()))
        except Exception as e:
            self.logger.error("Error replacing product", product_id=product.product_id, error=str(e))
            raise ExternalServiceError("postgres", str(e)) from e

        if result != "UPDATE 1":
            self.logger.warning("Product not found for replacement", product_id=product.product_id)

    async def delete(self, product_id: str) -> None:
        """Physically delete a product."""
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute("""
                    DELETE FROM products WHERE product_id = $1
                """, product_id)
        except Exception as e:
            self.logger.error("Error deleting product", product_id=product_id, error=str(e))
            raise ExternalServiceError("postgres", str(e)) from e

        if result != "DELETE 1":
            self.logger.warning("Product not found for deletion", product_id=product_id)

    def _row_to_product(self, row) -> Product:
        document = row['document']
        # asyncpg hands JSONB back as text unless a codec is registered
        if isinstance(document, str):
            document = json.loads(document)
        return Product.from_document(row['product_id'], document)

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except Exception:
            return False

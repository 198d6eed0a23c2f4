"""
Product data models for Catalog Service.
"""

from typing import Annotated, Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, PlainSerializer


PRICE_MAX_DIGITS = 15

# Decimal in Python, plain JSON number on the wire. A double carries any
# decimal of up to PRICE_MAX_DIGITS significant digits exactly.
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Product:
    """Catalog product.

    ``product_id`` stays ``None`` until the store assigns it on insert.
    ``deleted_date`` and ``is_logical_deleted`` are carried through storage
    but no operation sets them; deletion is physical.
    """
    name: str
    price: Decimal
    description: Optional[str] = None
    product_id: Optional[str] = None
    created_date: datetime = field(default_factory=utcnow)
    updated_date: Optional[datetime] = None
    deleted_date: Optional[datetime] = None
    is_logical_deleted: bool = False

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the stored document (identity is kept outside it)."""
        return {
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "created_date": _format_datetime(self.created_date),
            "updated_date": _format_datetime(self.updated_date),
            "deleted_date": _format_datetime(self.deleted_date),
            "is_logical_deleted": self.is_logical_deleted,
        }

    @classmethod
    def from_document(cls, product_id: str, document: Dict[str, Any]) -> "Product":
        return cls(
            product_id=product_id,
            name=document["name"],
            description=document.get("description"),
            price=Decimal(document["price"]),
            created_date=datetime.fromisoformat(document["created_date"]),
            updated_date=_parse_datetime(document.get("updated_date")),
            deleted_date=_parse_datetime(document.get("deleted_date")),
            is_logical_deleted=bool(document.get("is_logical_deleted", False)),
        )

    def __str__(self) -> str:
        return f"Id: {self.product_id}, Name: {self.name}, Description: {self.description}, Price: {self.price}"


class CreateStatus(str, Enum):
    """Outcome of a create with respect to its notification."""
    PERSISTED_AND_NOTIFIED = "persisted_and_notified"
    PERSISTED_ONLY = "persisted_only"


@dataclass
class CreateResult:
    """Result of creating a product."""
    product: Product
    status: CreateStatus

    @property
    def notified(self) -> bool:
        return self.status is CreateStatus.PERSISTED_AND_NOTIFIED


class ProductRequest(BaseModel):
    """Request model for creating or updating a product."""
    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., max_digits=PRICE_MAX_DIGITS, description="Product price")


class ProductResponse(BaseModel):
    """Response model for a product.

    Its JSON form is also the cached representation.
    """
    id: str
    name: str
    description: Optional[str] = None
    price: JsonDecimal
    created_date: datetime
    updated_date: Optional[datetime] = None
    deleted_date: Optional[datetime] = None
    is_logical_deleted: bool = False

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.product_id,
            name=product.name,
            description=product.description,
            price=product.price,
            created_date=product.created_date,
            updated_date=product.updated_date,
            deleted_date=product.deleted_date,
            is_logical_deleted=product.is_logical_deleted,
        )


class ProductCreatedResponse(BaseModel):
    """Response for a create whose notification could not be delivered."""
    product: ProductResponse
    message: str


class ProductUpdatedResponse(BaseModel):
    """Response for a successful update."""
    message: str
    product: ProductResponse


class ProductDeletedResponse(BaseModel):
    """Confirmation for a successful delete."""
    success: bool = True
    message: str

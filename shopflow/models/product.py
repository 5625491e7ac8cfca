# shopflow/models/product.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

CATEGORIES: tuple[str, ...] = ("electronics", "clothing", "books", "home", "sports")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a timestamp to aware UTC.

    SQLite hands back naive datetimes; those are taken as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_product_id() -> str:
    return uuid.uuid4().hex


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Storage notes:
      - row_id is a surrogate autoincrement key; it records insertion
        order and is the tie-breaker for every catalog sort.
      - id is the public identifier, immutable once assigned.
      - images, tags, shipping, specifications and seo are JSON columns.
      - discount is flattened into three nullable columns.

    Derived values (discounted price, stock and sale status) are never
    stored; see shopflow.services.pricing.
    """

    __tablename__ = "products"

    row_id: int | None = Field(default=None, primary_key=True)

    id: str = Field(
        default_factory=new_product_id,
        unique=True,
        index=True,
        max_length=64,
        description="Public product identifier",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    name: str = Field(max_length=200, index=True)

    description: str = Field(max_length=2000)

    price: float = Field(index=True, description="Unit price")

    category: str = Field(max_length=20, index=True)

    images: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    inventory: int = Field(default=0, ge=0, description="Units available")

    vendor_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owning vendor account",
    )

    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    rating: float = Field(default=0, index=True)

    review_count: int = Field(default=0)

    active: bool = Field(
        default=True,
        index=True,
        description="Soft-delete flag; inactive products are hidden from customers",
    )

    featured: bool = Field(default=False, index=True)

    discount_percentage: float | None = Field(default=None)
    discount_start: datetime | None = Field(default=None)
    discount_end: datetime | None = Field(default=None)

    shipping: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    specifications: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON)
    )

    seo: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last mutation timestamp (UTC)",
    )

    @property
    def has_discount(self) -> bool:
        return any(
            v is not None
            for v in (self.discount_percentage, self.discount_start, self.discount_end)
        )

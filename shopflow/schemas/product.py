# shopflow/schemas/product.py
import re
import uuid
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from shopflow.models.product import as_utc

# Keep in sync with shopflow.models.product.CATEGORIES
Category = Literal["electronics", "clothing", "books", "home", "sports"]

SortField = Literal[
    "createdAt", "updatedAt", "price", "name", "rating", "reviewCount", "inventory"
]

SortOrder = Literal["asc", "desc"]

IMAGE_URL_RE = re.compile(r"^https://.+\.(jpg|jpeg|png|webp|gif)$", re.IGNORECASE)

MIN_PRICE = 0.01
MAX_PRICE = 999999.99
MAX_IMAGES = 10
MAX_TAGS = 10


def _check_image_url(url: str) -> str:
    if not IMAGE_URL_RE.match(url):
        raise ValueError("Invalid image URL format")
    return url


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]
Description = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=10, max_length=2000)
]
Price = Annotated[float, Field(ge=MIN_PRICE, le=MAX_PRICE)]
ImageUrl = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_check_image_url)]
ImageList = Annotated[list[ImageUrl], Field(min_length=1, max_length=MAX_IMAGES)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
TagList = Annotated[list[Tag], Field(max_length=MAX_TAGS)]
Keyword = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
Count = Annotated[int, Field(ge=0)]
Rating = Annotated[float, Field(ge=0, le=5)]


class ApiModel(BaseModel):
    """
    Base for every wire model: camelCase on the wire, snake_case in Python.
    Inputs accept either spelling.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InputModel(ApiModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


# ----- Sub-records -----


class Dimensions(InputModel):
    length: float = Field(ge=0.1)
    width: float = Field(ge=0.1)
    height: float = Field(ge=0.1)


class Shipping(InputModel):
    weight: float = Field(ge=0.01)
    dimensions: Dimensions
    free_shipping: bool = False


class Discount(InputModel):
    """
    Time-boxed percentage discount.

    Bounds are optional; when both are present end_date must be
    strictly after start_date.
    """

    percentage: float | None = Field(default=None, ge=0, le=99)
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_tz(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @model_validator(mode="after")
    def check_window(self) -> "Discount":
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class Seo(InputModel):
    title: str | None = Field(default=None, max_length=60)
    description: str | None = Field(default=None, max_length=160)
    keywords: list[Keyword] = Field(default_factory=list)


# ----- Create / update payloads -----


def _wrap_single_image(v: Any) -> Any:
    # A lone URL string is accepted as a one-image gallery
    if isinstance(v, str):
        return [v]
    return v


def _dedupe_tags(tags: Any) -> Any:
    # Runs before item constraints so the size limit applies to the set
    if not isinstance(tags, list):
        return tags
    seen: set[str] = set()
    unique: list[Any] = []
    for tag in tags:
        if not isinstance(tag, str):
            unique.append(tag)
            continue
        key = tag.strip().casefold()
        if key not in seen:
            seen.add(key)
            unique.append(tag)
    return unique


class ProductCreate(InputModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    - vendor, id, active and timestamps are assigned by the service.
    """

    name: Name
    slug: str | None = None
    description: Description
    price: Price
    category: Category
    images: ImageList
    inventory: Count = 0
    tags: TagList = Field(default_factory=list)
    rating: Rating = 0
    review_count: Count = 0
    featured: bool = False
    discount: Discount | None = None
    shipping: Shipping
    specifications: dict[str, Any] = Field(default_factory=dict)
    seo: Seo | None = None

    @field_validator("images", mode="before")
    @classmethod
    def wrap_single_image(cls, v: Any) -> Any:
        return _wrap_single_image(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v: Any) -> Any:
        return _dedupe_tags(v)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class ProductUpdate(InputModel):
    """
    Partial update payload for products.

    All fields are optional; only the ones present in the request are
    validated and applied (see model_fields_set).
    """

    name: Name | None = None
    slug: str | None = None
    description: Description | None = None
    price: Price | None = None
    category: Category | None = None
    images: ImageList | None = None
    inventory: Count | None = None
    tags: TagList | None = None
    rating: Rating | None = None
    review_count: Count | None = None
    featured: bool | None = None
    active: bool | None = None
    discount: Discount | None = None
    shipping: Shipping | None = None
    specifications: dict[str, Any] | None = None
    seo: Seo | None = None

    @field_validator("images", mode="before")
    @classmethod
    def wrap_single_image(cls, v: Any) -> Any:
        return _wrap_single_image(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v: Any) -> Any:
        return _dedupe_tags(v)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty")
        return v


# ----- Query -----


class ProductQuery(InputModel):
    """
    List request parameters. Every filter is optional and combinable.
    """

    category: Category | None = None
    search: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "desc"
    include_inactive: bool = False

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("max_price")
    @classmethod
    def check_price_range(cls, v: float | None, info: ValidationInfo) -> float | None:
        min_price = info.data.get("min_price")
        if v is not None and min_price is not None and min_price > v:
            raise ValueError("maxPrice cannot be lower than minPrice")
        return v


# ----- Read models -----


class DiscountRead(ApiModel):
    percentage: float | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class ProductRead(ApiModel):
    """
    Product representation for clients, derived fields included.
    """

    id: str
    slug: str
    name: str
    description: str
    price: float
    category: str
    images: list[str]
    inventory: int
    vendor: uuid.UUID
    tags: list[str]
    rating: float
    review_count: int
    active: bool
    featured: bool
    discount: DiscountRead | None = None
    shipping: Shipping
    specifications: dict[str, Any]
    seo: Seo | None = None
    created_at: datetime
    updated_at: datetime

    discounted_price: float
    in_stock: bool
    on_sale: bool


class PageMeta(ApiModel):
    total: int
    page: int
    pages: int
    limit: int


class ProductPage(ApiModel):
    data: list[ProductRead]
    meta: PageMeta


class CategoryCount(ApiModel):
    name: str
    count: int


class MessageResponse(ApiModel):
    message: str

# shopflow/services/catalog_query.py
"""
Catalog query engine.

Works on a snapshot produced by ProductRepository.scan() (already in
insertion order) and never touches the database itself:

    active scope -> category -> search -> price range -> sort -> count -> slice
"""
import math
from dataclasses import dataclass
from typing import Any, Iterable

from shopflow.models.product import Product, as_utc
from shopflow.schemas.product import ProductQuery

# Wire sort key -> Product attribute
SORT_ATTRIBUTES: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "price": "price",
    "name": "name",
    "rating": "rating",
    "reviewCount": "review_count",
    "inventory": "inventory",
}


@dataclass
class QueryResult:
    items: list[Product]
    total: int
    page: int
    pages: int
    limit: int


def matches_search(product: Product, term: str) -> bool:
    """
    Case-insensitive substring match on name or description,
    or on any of the product's tags.
    """
    needle = term.lower()
    if needle in product.name.lower():
        return True
    if needle in product.description.lower():
        return True
    return any(needle in tag.lower() for tag in product.tags or [])


def filter_products(
    products: Iterable[Product],
    query: ProductQuery,
    include_inactive: bool = False,
) -> list[Product]:
    result: list[Product] = []
    for product in products:
        if not include_inactive and not product.active:
            continue
        if query.category is not None and product.category != query.category:
            continue
        if query.search is not None and not matches_search(product, query.search):
            continue
        if query.min_price is not None and product.price < query.min_price:
            continue
        if query.max_price is not None and product.price > query.max_price:
            continue
        result.append(product)
    return result


def _sort_key(attr: str):
    def key(product: Product) -> Any:
        value = getattr(product, attr)
        if attr in ("created_at", "updated_at"):
            return as_utc(value)
        if attr == "name":
            return value.casefold()
        return value

    return key


def sort_products(
    products: list[Product],
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> list[Product]:
    """
    Stable sort: products with equal keys keep their snapshot order,
    for both ascending and descending requests.
    """
    attr = SORT_ATTRIBUTES[sort_by]
    return sorted(products, key=_sort_key(attr), reverse=(sort_order == "desc"))


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def run_query(
    products: Iterable[Product],
    query: ProductQuery,
    include_inactive: bool = False,
) -> QueryResult:
    """
    Filter, sort and paginate a catalog snapshot.

    Deterministic and side-effect free. A page past the end yields an
    empty item list rather than an error.
    """
    matched = filter_products(products, query, include_inactive=include_inactive)
    ordered = sort_products(matched, query.sort_by, query.sort_order)

    total = len(ordered)
    start = (query.page - 1) * query.limit
    items = ordered[start : start + query.limit]

    return QueryResult(
        items=items,
        total=total,
        page=query.page,
        pages=page_count(total, query.limit),
        limit=query.limit,
    )

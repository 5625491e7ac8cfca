# shopflow/routers/products.py
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlmodel import Session

from shopflow.core.auth import get_current_user, require_auth, require_vendor
from shopflow.core.config import get_settings
from shopflow.database import get_session
from shopflow.models.user import User
from shopflow.repositories.product_repo import ProductRepository
from shopflow.schemas.product import (
    CategoryCount,
    MessageResponse,
    ProductPage,
    ProductRead,
)
from shopflow.services.product_service import ProductService
from shopflow.services.validation import validate_query

router = APIRouter(prefix="/products", tags=["Products"])

settings = get_settings()
repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
    category: str | None = None,
    search: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice"),
    max_price: float | None = Query(default=None, alias="maxPrice"),
    page: int = 1,
    limit: int | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
    include_inactive: bool = Query(default=False, alias="includeInactive"),
):
    """
    List active products.

    - Public endpoint.
    - Filters combine: category, search (name/description/tags),
      minPrice/maxPrice (inclusive).
    - Paginated with page/limit, sorted by sortBy/sortOrder
      (default createdAt desc).
    - includeInactive is honoured for admins only.
    """
    query = validate_query(
        {
            "category": category,
            "search": search,
            "minPrice": min_price,
            "maxPrice": max_price,
            "page": page,
            "limit": limit if limit is not None else settings.DEFAULT_PAGE_SIZE,
            "sortBy": sort_by,
            "sortOrder": sort_order,
            "includeInactive": include_inactive,
        },
        max_limit=settings.MAX_PAGE_SIZE,
    )
    return service.list_products(session, query, actor=current_user)


@router.get("/categories", response_model=list[CategoryCount])
def list_categories(session: Session = Depends(get_session)):
    """
    Active product count per category, largest first.
    """
    return service.category_counts(session)


@router.get("/featured", response_model=list[ProductRead])
def list_featured(
    session: Session = Depends(get_session),
    limit: int | None = Query(default=None, ge=1),
):
    """
    Featured active products, best rated first.
    """
    limit = min(limit or settings.FEATURED_LIMIT, settings.MAX_PAGE_SIZE)
    return service.featured_products(session, limit=limit)


@router.get("/{id_or_slug}", response_model=ProductRead)
def get_product(
    id_or_slug: str,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get a single product by id or slug.

    - Public endpoint; inactive products are visible to admins only.
    """
    return service.get_product(session, id_or_slug, actor=current_user)


# -------- Vendor / admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: Any = Body(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_vendor),
):
    """
    Create a new product owned by the calling vendor.
    """
    return service.create_product(session, payload, actor=current_user)


@router.put("/{product_id}", response_model=ProductRead)
@router.patch("/{product_id}", response_model=ProductRead, include_in_schema=False)
def update_product(
    product_id: str,
    payload: Any = Body(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update an existing product.

    - Vendors may only update their own products; admins any.
    - Only supplied fields are validated and changed.
    """
    return service.update_product(session, product_id, payload, actor=current_user)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
) -> dict[str, str]:
    """
    Soft delete a product (it stays stored but leaves the storefront).

    - Same ownership rule as update.
    - Deleting an already deleted product succeeds.
    """
    service.soft_delete_product(session, product_id, actor=current_user)
    return {"message": "Product deleted successfully"}

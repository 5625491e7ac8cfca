# shopflow/services/product_service.py
import logging
import re
from datetime import datetime
from typing import Any

from sqlmodel import Session

from shopflow.core.errors import Forbidden, ProductNotFound
from shopflow.models.product import Product, as_utc
from shopflow.models.user import User
from shopflow.repositories.product_repo import ProductRepository
from shopflow.schemas.product import (
    CategoryCount,
    DiscountRead,
    PageMeta,
    ProductCreate,
    ProductPage,
    ProductQuery,
    ProductRead,
    ProductUpdate,
)
from shopflow.services import pricing
from shopflow.services.catalog_query import run_query
from shopflow.services.validation import validate_create, validate_update

logger = logging.getLogger(__name__)

# Static routes under /products that would shadow a product slug
RESERVED_SLUGS = frozenset({"categories", "featured"})


def can_mutate(actor: User, product: Product) -> bool:
    """An admin may change any product; a vendor only the ones it owns."""
    return actor.is_admin or actor.id == product.vendor_id


def is_privileged(actor: User | None) -> bool:
    return actor is not None and actor.is_admin


class ProductService:
    """
    Catalog service API.

    Responsibilities:
      - active scoping for customer-facing reads
      - role and ownership checks for mutations
      - slug generation & uniqueness
      - running the validation layer before anything is stored
      - rendering products with their derived fields
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _slug_taken(
        self, session: Session, slug: str, exclude_id: str | None = None
    ) -> bool:
        if slug in RESERVED_SLUGS:
            return True
        existing = self.repo.get_by_slug(session, slug)
        return existing is not None and existing.id != exclude_id

    def _ensure_unique_slug(
        self, session: Session, base_slug: str, exclude_id: str | None = None
    ) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.

        The product being updated (exclude_id) does not conflict with itself.
        Callers hold repo.slug_lock until the slug is written.
        """
        slug = base_slug
        i = 2
        while self._slug_taken(session, slug, exclude_id):
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    @staticmethod
    def to_read(product: Product, now: datetime | None = None) -> ProductRead:
        discount = None
        if product.has_discount:
            discount = DiscountRead(
                percentage=product.discount_percentage,
                start_date=as_utc(product.discount_start),
                end_date=as_utc(product.discount_end),
            )

        return ProductRead(
            id=product.id,
            slug=product.slug,
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            images=list(product.images or []),
            inventory=product.inventory,
            vendor=product.vendor_id,
            tags=list(product.tags or []),
            rating=product.rating,
            review_count=product.review_count,
            active=product.active,
            featured=product.featured,
            discount=discount,
            shipping=product.shipping,
            specifications=dict(product.specifications or {}),
            seo=product.seo,
            created_at=as_utc(product.created_at),
            updated_at=as_utc(product.updated_at),
            discounted_price=pricing.discounted_price(product, now),
            in_stock=pricing.in_stock(product),
            on_sale=pricing.is_on_sale(product, now),
        )

    def _load(self, session: Session, product_id: str) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if product is None:
            raise ProductNotFound()
        return product

    def _check_can_mutate(self, actor: User, product: Product) -> None:
        if not can_mutate(actor, product):
            logger.warning(
                "User %s (%s) denied mutation of product %s",
                actor.id,
                actor.role,
                product.id,
            )
            raise Forbidden("You can only modify your own products")

    @staticmethod
    def _apply_discount(product: Product, discount: dict[str, Any] | None) -> None:
        if discount is None:
            product.discount_percentage = None
            product.discount_start = None
            product.discount_end = None
            return
        product.discount_percentage = discount.get("percentage")
        product.discount_start = discount.get("start_date")
        product.discount_end = discount.get("end_date")

    # ----- Reads -----

    def list_products(
        self,
        session: Session,
        query: ProductQuery,
        actor: User | None = None,
    ) -> ProductPage:
        """
        Filtered, sorted, paginated catalog page.

        includeInactive is honoured for admins only.
        """
        include_inactive = query.include_inactive and is_privileged(actor)
        snapshot = self.repo.scan(session, only_active=not include_inactive)
        result = run_query(snapshot, query, include_inactive=include_inactive)
        return ProductPage(
            data=[self.to_read(p) for p in result.items],
            meta=PageMeta(
                total=result.total,
                page=result.page,
                pages=result.pages,
                limit=result.limit,
            ),
        )

    def get_product(
        self,
        session: Session,
        id_or_slug: str,
        actor: User | None = None,
    ) -> ProductRead:
        product = self.repo.get_by_id(session, id_or_slug)
        if product is None:
            product = self.repo.get_by_slug(session, id_or_slug)
        if product is None or (not product.active and not is_privileged(actor)):
            raise ProductNotFound()
        return self.to_read(product)

    def category_counts(self, session: Session) -> list[CategoryCount]:
        return [
            CategoryCount(name=name, count=count)
            for name, count in self.repo.category_counts(session)
        ]

    def featured_products(self, session: Session, limit: int = 10) -> list[ProductRead]:
        return [self.to_read(p) for p in self.repo.featured(session, limit=limit)]

    # ----- Mutations -----

    def create_product(
        self,
        session: Session,
        payload: Any,
        actor: User,
    ) -> ProductRead:
        """
        Create a product owned by the acting vendor (or admin).

        - Role is checked before the payload is validated.
        - If slug is provided => slugify & ensure unique.
        - Else => slugify from name & ensure unique.
        """
        if not (actor.is_vendor or actor.is_admin):
            raise Forbidden("Only vendors can create products")

        data: ProductCreate = validate_create(payload)

        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            category=data.category,
            images=list(data.images),
            inventory=data.inventory,
            vendor_id=actor.id,
            tags=list(data.tags),
            rating=data.rating,
            review_count=data.review_count,
            active=True,
            featured=data.featured,
            shipping=data.shipping.model_dump(),
            specifications=data.specifications,
            seo=data.seo.model_dump() if data.seo else None,
        )
        self._apply_discount(
            product, data.discount.model_dump() if data.discount else None
        )
        with self.repo.slug_lock:
            base_slug = self.slugify(data.slug or data.name)
            product.slug = self._ensure_unique_slug(session, base_slug)
            created = self.repo.upsert(session, product)
        logger.info("Product %s created by %s", created.id, actor.id)
        return self.to_read(created)

    def update_product(
        self,
        session: Session,
        product_id: str,
        payload: Any,
        actor: User,
    ) -> ProductRead:
        """
        Partial update of a product.

        - 404 before 403: unknown ids are reported as not found.
        - Only supplied fields are validated and applied.
        - If slug is changed, enforce uniqueness.
        """
        product = self._load(session, product_id)
        with self.repo.lock_for(product.id):
            session.refresh(product)
            self._check_can_mutate(actor, product)

            data: ProductUpdate = validate_update(payload, product)
            changes = {field: getattr(data, field) for field in data.model_fields_set}

            new_base_slug = None
            if "slug" in changes:
                new_base_slug = self.slugify(changes.pop("slug"))
                if new_base_slug == product.slug:
                    new_base_slug = None

            if "discount" in changes:
                discount = changes.pop("discount")
                self._apply_discount(
                    product, discount.model_dump() if discount else None
                )

            for field in ("shipping", "seo"):
                if changes.get(field) is not None:
                    changes[field] = changes[field].model_dump()
            for field in ("images", "tags"):
                if field in changes:
                    changes[field] = list(changes[field])

            for field, value in changes.items():
                setattr(product, field, value)

            if new_base_slug is None:
                updated = self.repo.upsert(session, product)
            else:
                with self.repo.slug_lock:
                    product.slug = self._ensure_unique_slug(
                        session, new_base_slug, exclude_id=product.id
                    )
                    updated = self.repo.upsert(session, product)

        logger.info("Product %s updated by %s", updated.id, actor.id)
        return self.to_read(updated)

    def soft_delete_product(
        self,
        session: Session,
        product_id: str,
        actor: User,
    ) -> None:
        """
        Hide a product from the storefront.

        Idempotent: deleting an already inactive product succeeds.
        """
        product = self._load(session, product_id)
        with self.repo.lock_for(product.id):
            session.refresh(product)
            self._check_can_mutate(actor, product)

            product.active = False
            self.repo.upsert(session, product)

        logger.info("Product %s soft-deleted by %s", product_id, actor.id)

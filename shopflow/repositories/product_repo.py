# shopflow/repositories/product_repo.py
from threading import Lock, RLock

from sqlalchemy import func
from sqlmodel import Session, select

from shopflow.models.product import Product, utcnow


class ProductRepository:
    """
    Catalog store for Product.

    - Pure DB operations (lookups, upsert, snapshot scans, aggregates).
    - No FastAPI, no business logic.
    - Hands out one lock per product id so callers can serialize
      read-modify-write sequences on the same record. Reads never lock.
    - slug_lock serializes slug allocation with the write that claims it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, RLock] = {}
        self._locks_guard = Lock()
        self.slug_lock = RLock()

    def lock_for(self, product_id: str) -> RLock:
        """Only call with ids of stored products; the registry is never pruned."""
        with self._locks_guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = RLock()
                self._locks[product_id] = lock
            return lock

    # ----- Lookups -----

    def get_by_id(self, session: Session, product_id: str) -> Product | None:
        stmt = select(Product).where(Product.id == product_id)
        return session.exec(stmt).first()

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def scan(self, session: Session, only_active: bool = True) -> list[Product]:
        """
        Point-in-time snapshot of the catalog in insertion order.

        Writes committed after the SELECT are not reflected.
        """
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.active == True)  # noqa: E712
        stmt = stmt.order_by(Product.row_id)
        return list(session.exec(stmt).all())

    # ----- Writes -----

    def upsert(self, session: Session, product: Product) -> Product:
        """
        Insert a new product or replace the stored one with the same id.

        updated_at is refreshed on every call; created_at of an existing
        record is preserved.
        """
        product.updated_at = utcnow()

        if product.row_id is None:
            current = self.get_by_id(session, product.id)
            if current is not None:
                product.row_id = current.row_id
                product.created_at = current.created_at

        product = session.merge(product)
        session.commit()
        session.refresh(product)
        return product

    # ----- Aggregates -----

    def category_counts(self, session: Session) -> list[tuple[str, int]]:
        """
        Active product count per category, largest first.
        Ties are ordered by category name.
        """
        count = func.count(Product.row_id)
        stmt = (
            select(Product.category, count.label("count"))
            .where(Product.active == True)  # noqa: E712
            .group_by(Product.category)
            .order_by(count.desc(), Product.category)
        )
        return [(category, int(n)) for category, n in session.exec(stmt).all()]

    def featured(self, session: Session, limit: int = 10) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.active == True, Product.featured == True)  # noqa: E712
            .order_by(Product.rating.desc(), Product.review_count.desc(), Product.row_id)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

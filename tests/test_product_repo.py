import threading
import uuid

from sqlmodel import Session

from shopflow.models.product import Product
from shopflow.repositories.product_repo import ProductRepository

VENDOR = uuid.uuid4()


def _product(name: str, **kwargs) -> Product:
    defaults = dict(
        slug=name.lower().replace(" ", "-"),
        name=name,
        description="Repository test product",
        price=10.0,
        category="home",
        vendor_id=VENDOR,
        images=["https://cdn.shopflow.test/x.jpg"],
        shipping={"weight": 1, "dimensions": {"length": 1, "width": 1, "height": 1}},
    )
    defaults.update(kwargs)
    return Product(**defaults)


def test_upsert_inserts_and_lookups(session: Session):
    repo = ProductRepository()
    stored = repo.upsert(session, _product("Desk Lamp", tags=["office"]))

    assert stored.row_id is not None
    assert repo.get_by_id(session, stored.id).name == "Desk Lamp"
    assert repo.get_by_slug(session, "desk-lamp").id == stored.id
    assert repo.get_by_id(session, "missing") is None
    assert stored.tags == ["office"]


def test_upsert_replaces_by_id_and_keeps_created_at(engine):
    repo = ProductRepository()
    with Session(engine) as session:
        original = repo.upsert(session, _product("Desk Lamp"))
        product_id = original.id
        created_at = original.created_at
        first_updated = original.updated_at

    replacement = _product("Desk Lamp XL", id=product_id, slug="desk-lamp", price=15.0)
    with Session(engine) as session:
        stored = repo.upsert(session, replacement)
        assert stored.name == "Desk Lamp XL"
        assert stored.price == 15.0
        assert stored.created_at == created_at
        assert stored.updated_at >= first_updated
        assert len(repo.scan(session, only_active=False)) == 1


def test_scan_is_insertion_ordered_and_active_scoped(session: Session):
    repo = ProductRepository()
    a = repo.upsert(session, _product("Alpha"))
    b = repo.upsert(session, _product("Bravo", active=False))
    c = repo.upsert(session, _product("Charlie"))

    assert [p.id for p in repo.scan(session)] == [a.id, c.id]
    assert [p.id for p in repo.scan(session, only_active=False)] == [a.id, b.id, c.id]


def test_category_counts_orders_by_count(session: Session):
    repo = ProductRepository()
    repo.upsert(session, _product("Book one", category="books"))
    repo.upsert(session, _product("Shirt", category="clothing"))
    repo.upsert(session, _product("Book two", category="books"))
    repo.upsert(session, _product("Ball", category="sports"))
    repo.upsert(session, _product("Hidden book", category="books", active=False))

    assert repo.category_counts(session) == [
        ("books", 2),
        ("clothing", 1),
        ("sports", 1),
    ]


def test_featured_ordering(session: Session):
    repo = ProductRepository()
    repo.upsert(session, _product("Plain", rating=5))
    mid = repo.upsert(session, _product("Mid", featured=True, rating=4, review_count=10))
    top = repo.upsert(session, _product("Top", featured=True, rating=4, review_count=50))
    repo.upsert(session, _product("Gone", featured=True, rating=5, active=False))

    assert [p.id for p in repo.featured(session, limit=10)] == [top.id, mid.id]
    assert [p.id for p in repo.featured(session, limit=1)] == [top.id]


def test_lock_for_is_per_product():
    repo = ProductRepository()
    assert repo.lock_for("a") is repo.lock_for("a")
    assert repo.lock_for("a") is not repo.lock_for("b")


def test_lock_for_is_shared_across_threads():
    repo = ProductRepository()
    seen = []

    def grab():
        seen.append(repo.lock_for("same"))

    threads = [threading.Thread(target=grab) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(lock) for lock in seen}) == 1

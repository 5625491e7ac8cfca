from sqlmodel import Session

from shopflow.fixtures import DEMO_PRODUCTS, DEMO_VENDOR_ID, seed_catalog
from shopflow.repositories.product_repo import ProductRepository


def test_seed_loads_demo_catalog_once(session: Session):
    assert seed_catalog(session) == len(DEMO_PRODUCTS)
    assert seed_catalog(session) == 0

    products = ProductRepository().scan(session)
    assert len(products) == len(DEMO_PRODUCTS)
    assert {p.vendor_id for p in products} == {DEMO_VENDOR_ID}


def test_seeded_catalog_is_queryable(client, session: Session):
    seed_catalog(session)

    body = client.get(
        "/api/products", params={"category": "electronics", "minPrice": 100}
    ).json()
    assert [p["name"] for p in body["data"]] == [
        "Professional Camera Lens",
        "Smart Fitness Watch",
    ]

    lens = body["data"][0]
    assert lens["inStock"] is False

    headphones = client.get("/api/products/wireless-bluetooth-headphones").json()
    assert headphones["onSale"] is True
    assert headphones["discountedPrice"] == 79.99

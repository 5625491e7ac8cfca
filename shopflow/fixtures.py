# shopflow/fixtures.py
"""
Demo catalog for local development and smoke tests.
"""
import uuid

from sqlmodel import Session

from shopflow.models.user import ROLE_VENDOR, User
from shopflow.repositories.product_repo import ProductRepository
from shopflow.repositories.user_repo import UserRepository
from shopflow.services.product_service import ProductService

DEMO_VENDOR_ID = uuid.uuid5(uuid.NAMESPACE_DNS, "shopflow-demo-vendor")
DEMO_VENDOR_EMAIL = "vendor@shopflow.test"

_BOX = {"weight": 1.0, "dimensions": {"length": 20, "width": 15, "height": 10}}

DEMO_PRODUCTS: list[dict] = [
    {
        "name": "Wireless Bluetooth Headphones",
        "price": 99.99,
        "images": ["https://cdn.shopflow.test/img/headphones.jpg"],
        "rating": 4.5,
        "reviewCount": 128,
        "description": "Premium quality wireless headphones with noise cancellation.",
        "category": "electronics",
        "inventory": 25,
        "tags": ["audio", "wireless"],
        "featured": True,
        "discount": {"percentage": 20},
        "shipping": {**_BOX, "freeShipping": True},
    },
    {
        "name": "Smart Fitness Watch",
        "price": 199.99,
        "images": ["https://cdn.shopflow.test/img/smart-watch.jpg"],
        "rating": 4.3,
        "reviewCount": 89,
        "description": "Track your goals with heart rate, sleep tracking, and GPS.",
        "category": "electronics",
        "inventory": 12,
        "tags": ["fitness", "wearable"],
        "shipping": _BOX,
    },
    {
        "name": "Organic Cotton T-Shirt",
        "price": 29.99,
        "images": ["https://cdn.shopflow.test/img/t-shirt.jpg"],
        "rating": 4.7,
        "reviewCount": 256,
        "description": "Soft, sustainable fabric available in multiple colours.",
        "category": "clothing",
        "inventory": 80,
        "tags": ["organic", "cotton"],
        "featured": True,
        "discount": {"percentage": 15},
        "shipping": {**_BOX, "weight": 0.2},
    },
    {
        "name": "Professional Camera Lens",
        "price": 449.99,
        "images": ["https://cdn.shopflow.test/img/camera-lens.jpg"],
        "rating": 4.8,
        "reviewCount": 45,
        "description": "Crisp optics with weather sealing and 3-year warranty.",
        "category": "electronics",
        "inventory": 0,
        "tags": ["photography"],
        "shipping": _BOX,
    },
    {
        "name": "Yoga Mat Premium",
        "price": 59.99,
        "images": ["https://cdn.shopflow.test/img/yoga-mat.jpg"],
        "rating": 4.6,
        "reviewCount": 312,
        "description": "Non-slip premium yoga mat for all skill levels.",
        "category": "sports",
        "inventory": 40,
        "tags": ["yoga", "fitness"],
        "discount": {"percentage": 10},
        "shipping": {**_BOX, "weight": 1.5},
    },
    {
        "name": "JavaScript: The Good Parts",
        "price": 34.99,
        "images": ["https://cdn.shopflow.test/img/js-book.jpg"],
        "rating": 4.4,
        "reviewCount": 189,
        "description": "Classic read for honing your JavaScript intuition.",
        "category": "books",
        "inventory": 60,
        "tags": ["programming", "javascript"],
        "shipping": {**_BOX, "weight": 0.5},
    },
]


def ensure_demo_vendor(session: Session, users: UserRepository) -> User:
    vendor = users.get_by_id(session, DEMO_VENDOR_ID)
    if vendor is None:
        vendor = users.create(
            session,
            User(
                id=DEMO_VENDOR_ID,
                email=DEMO_VENDOR_EMAIL,
                name="Demo Vendor",
                role=ROLE_VENDOR,
            ),
        )
    return vendor


def seed_catalog(session: Session, repo: ProductRepository | None = None) -> int:
    """
    Load DEMO_PRODUCTS through the catalog service.

    Products whose slug already exists are skipped, so the seed can be
    run repeatedly. Returns the number of products created.
    """
    repo = repo or ProductRepository()
    service = ProductService(repo)
    vendor = ensure_demo_vendor(session, UserRepository())

    created = 0
    for payload in DEMO_PRODUCTS:
        if repo.get_by_slug(session, service.slugify(payload["name"])) is not None:
            continue
        service.create_product(session, payload, actor=vendor)
        created += 1
    return created

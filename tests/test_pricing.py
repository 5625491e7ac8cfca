import uuid
from datetime import datetime, timedelta, timezone

from shopflow.models.product import Product
from shopflow.services.pricing import discounted_price, in_stock, is_on_sale

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _product(**kwargs) -> Product:
    defaults = dict(
        slug="p",
        name="Product",
        description="A product for pricing tests",
        price=100.0,
        category="home",
        vendor_id=uuid.uuid4(),
        inventory=3,
    )
    defaults.update(kwargs)
    return Product(**defaults)


def test_no_discount_keeps_price():
    product = _product()
    assert is_on_sale(product, NOW) is False
    assert discounted_price(product, NOW) == 100.0


def test_discount_within_window():
    product = _product(
        discount_percentage=20,
        discount_start=NOW - timedelta(days=1),
        discount_end=NOW + timedelta(days=1),
    )
    assert is_on_sale(product, NOW) is True
    assert discounted_price(product, NOW) == 80.0


def test_discount_after_window_ends():
    product = _product(
        discount_percentage=20,
        discount_start=NOW - timedelta(days=1),
        discount_end=NOW + timedelta(days=1),
    )
    later = NOW + timedelta(days=2)
    assert is_on_sale(product, later) is False
    assert discounted_price(product, later) == 100.0


def test_discount_before_window_starts():
    product = _product(discount_percentage=10, discount_start=NOW + timedelta(hours=1))
    assert is_on_sale(product, NOW) is False


def test_open_ended_window():
    product = _product(discount_percentage=15)
    assert is_on_sale(product, NOW) is True
    assert discounted_price(product, NOW) == 85.0


def test_zero_percentage_is_not_a_sale():
    product = _product(discount_percentage=0)
    assert is_on_sale(product, NOW) is False
    assert discounted_price(product, NOW) == 100.0


def test_window_bounds_are_inclusive():
    product = _product(discount_percentage=50, discount_start=NOW, discount_end=NOW)
    assert is_on_sale(product, NOW) is True


def test_naive_stored_dates_are_utc():
    product = _product(
        discount_percentage=25,
        discount_start=datetime(2026, 5, 31, 12, 0),
        discount_end=datetime(2026, 6, 2, 12, 0),
    )
    assert is_on_sale(product, NOW) is True
    assert discounted_price(product, NOW) == 75.0


def test_in_stock():
    assert in_stock(_product(inventory=1)) is True
    assert in_stock(_product(inventory=0)) is False

# shopflow/services/pricing.py
"""
Read-time derivations for a product.

None of these values are stored; computing them on read keeps them
correct as discount windows open and close.
"""
from datetime import datetime

from shopflow.models.product import Product, as_utc, utcnow


def is_on_sale(product: Product, now: datetime | None = None) -> bool:
    """
    True when the product has a positive discount whose window contains `now`.

    Both window bounds are inclusive; a missing bound is open-ended.
    """
    pct = product.discount_percentage
    if pct is None or pct <= 0:
        return False

    now = as_utc(now) if now is not None else utcnow()
    start = as_utc(product.discount_start)
    end = as_utc(product.discount_end)

    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False
    return True


def discounted_price(product: Product, now: datetime | None = None) -> float:
    if is_on_sale(product, now):
        return round(product.price * (1 - product.discount_percentage / 100), 2)
    return product.price


def in_stock(product: Product) -> bool:
    return product.inventory > 0

# shopflow/services/validation.py
"""
Validation layer for catalog payloads.

Runs the pydantic schemas in shopflow.schemas.product against plain
request data and turns every failure into a single ValidationFailed
carrying all violations, each as {"field", "message"}. Nothing here
knows about the database.
"""
from typing import Any

from pydantic import ValidationError

from shopflow.core.errors import ValidationFailed
from shopflow.models.product import Product
from shopflow.schemas.product import ProductCreate, ProductQuery, ProductUpdate

# Assigned by the service, never by clients
READ_ONLY_FIELDS: dict[str, str] = {
    "id": "id",
    "vendor": "vendor",
    "vendorId": "vendor",
    "vendor_id": "vendor",
    "createdAt": "createdAt",
    "created_at": "createdAt",
    "updatedAt": "updatedAt",
    "updated_at": "updatedAt",
    "discountedPrice": "discountedPrice",
    "discounted_price": "discountedPrice",
    "inStock": "inStock",
    "in_stock": "inStock",
    "onSale": "onSale",
    "on_sale": "onSale",
}

# Optional sub-records an update may clear with an explicit null
NULLABLE_UPDATE_FIELDS = {"discount", "seo"}

_DISCOUNT_KEYS = {
    "percentage": "percentage",
    "startDate": "startDate",
    "start_date": "startDate",
    "endDate": "endDate",
    "end_date": "endDate",
}

_VALUE_ERROR_PREFIX = "Value error, "


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "payload"


def _message(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX) :]
    return msg


def violations_from_error(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"field": _field_name(tuple(err["loc"])), "message": _message(err["msg"])}
        for err in exc.errors()
    ]


def _ensure_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationFailed(
            [{"field": "payload", "message": "Request body must be a JSON object"}]
        )
    return payload


def _strip_read_only(
    payload: dict[str, Any], violations: list[dict[str, str]]
) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in payload.items():
        if key in READ_ONLY_FIELDS:
            violations.append(
                {"field": READ_ONLY_FIELDS[key], "message": "Field is read-only"}
            )
            continue
        cleaned[key] = value
    return cleaned


def validate_create(payload: Any) -> ProductCreate:
    """
    Validate a full create payload.

    Raises:
        ValidationFailed: listing every violated constraint.
    """
    data = _ensure_object(payload)
    violations: list[dict[str, str]] = []
    data = _strip_read_only(data, violations)

    result: ProductCreate | None = None
    try:
        result = ProductCreate.model_validate(data)
    except ValidationError as exc:
        violations.extend(violations_from_error(exc))

    if violations:
        raise ValidationFailed(violations)
    return result


def _existing_discount(product: Product) -> dict[str, Any]:
    current = {
        "percentage": product.discount_percentage,
        "startDate": product.discount_start,
        "endDate": product.discount_end,
    }
    return {k: v for k, v in current.items() if v is not None}


def _merge_discount(product: Product, supplied: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay supplied discount keys on the stored discount so the date
    ordering is checked against the full pair.
    """
    merged = _existing_discount(product)
    for key, value in supplied.items():
        merged[_DISCOUNT_KEYS.get(key, key)] = value
    return merged


def validate_update(payload: Any, existing: Product) -> ProductUpdate:
    """
    Validate a partial update against the stored product.

    Only supplied fields are checked. A supplied discount is merged
    with the stored one before validation.

    Raises:
        ValidationFailed: listing every violated constraint.
    """
    data = _ensure_object(payload)
    violations: list[dict[str, str]] = []
    data = _strip_read_only(data, violations)

    for key in list(data):
        if data[key] is None and key not in NULLABLE_UPDATE_FIELDS:
            violations.append({"field": key, "message": "Field cannot be null"})
            del data[key]

    if isinstance(data.get("discount"), dict):
        data["discount"] = _merge_discount(existing, data["discount"])

    result: ProductUpdate | None = None
    try:
        result = ProductUpdate.model_validate(data)
    except ValidationError as exc:
        violations.extend(violations_from_error(exc))

    if violations:
        raise ValidationFailed(violations)
    return result


def validate_query(params: dict[str, Any], max_limit: int) -> ProductQuery:
    """
    Build a ProductQuery from request parameters keyed by their wire
    names (None means not given).

    Raises:
        ValidationFailed: on bad enum values, ranges or page bounds.
    """
    supplied = {k: v for k, v in params.items() if v is not None}
    try:
        query = ProductQuery.model_validate(supplied)
    except ValidationError as exc:
        raise ValidationFailed(violations_from_error(exc))

    if query.limit > max_limit:
        raise ValidationFailed(
            [{"field": "limit", "message": f"limit cannot exceed {max_limit}"}]
        )
    return query

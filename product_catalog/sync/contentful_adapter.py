"""Maps Contentful entries onto ``products`` row values."""

from decimal import Decimal, InvalidOperation
from typing import Any

from product_catalog.utils.errors import ValidationError

TEXT_FIELDS = ("sku", "name", "brand", "model", "category", "color", "currency")
MAX_PRICE = Decimal("1e8")


def external_id_of(item: dict[str, Any]) -> str:
    """``sys.id`` of a Contentful entry, or a top-level ``id`` for flattened payloads."""
    sys = item.get("sys")
    external_id = sys.get("id") if isinstance(sys, dict) else None
    if external_id is None:
        external_id = item.get("id")
    if not external_id:
        raise ValidationError("Entry has no id")
    return str(external_id)


def _price(value: Any) -> Decimal | None:
    if value is None:
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid price {value!r}") from exc
    if not price.is_finite():
        raise ValidationError(f"Invalid price {value!r}")
    price = price.quantize(Decimal("0.01"))
    # products.price is NUMERIC(10, 2)
    if abs(price) >= MAX_PRICE:
        raise ValidationError(f"Price out of range {value!r}")
    return price


def _stock(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid stock {value!r}") from exc


def to_product_values(item: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """
    Convert one Contentful entry.

    Only fields present in the entry are returned, so an update leaves the
    others untouched.

    Returns:
        ``(external_id, values)``

    Raises:
        ValidationError: If the entry has no id, no name, or unparseable numbers
    """
    external_id = external_id_of(item)
    fields = item.get("fields")
    if not isinstance(fields, dict):
        raise ValidationError(f"Entry {external_id} has no fields")
    if not fields.get("name"):
        raise ValidationError(f"Entry {external_id} has no name")

    values: dict[str, Any] = {}
    for key in TEXT_FIELDS:
        if key in fields:
            value = fields[key]
            values[key] = str(value) if value is not None else None
    if "price" in fields:
        values["price"] = _price(fields["price"])
    if "stock" in fields:
        values["stock"] = _stock(fields["stock"])
    return external_id, values

"""
Cart Input Validation Utility

Two policies live here:
- Identifiers (user id, product id) and the quantity of a set-quantity call
  are strict: anything that is not a positive integer raises ValidationException.
- Line metadata on write paths that accept arbitrary input (upsert, replace)
  is coerced instead of rejected, so a usable record is always stored.
"""

import math
from collections.abc import Mapping
from typing import Any

from exceptions.base import ValidationException

PRODUCT_ID_KEYS = ("productId", "product_id", "id")


def parse_positive_int(value: Any, field: str) -> int:
    """
    Parse a strictly positive integer.

    Accepts ints, integral floats (2.0) and ASCII base-10 digit strings ("42", " 7 ").
    Booleans are rejected even though bool subclasses int.

    Args:
        value: Raw value from a request, path or caller
        field: Field name used in the error message

    Returns:
        int: The parsed value (> 0)

    Raises:
        ValidationException: If value is not a positive integer
    """
    parsed = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and math.isfinite(value) and value.is_integer():
        parsed = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            parsed = int(text)

    if parsed is None or parsed <= 0:
        raise ValidationException(f"Invalid {field}: must be a positive integer", field=field)
    return parsed


def coerce_quantity(value: Any) -> int:
    """Quantity for additive/replace writes: anything not a positive integer becomes 1."""
    try:
        return parse_positive_int(value, "quantity")
    except ValidationException:
        return 1


def coerce_price(value: Any) -> float:
    """Missing, non-numeric, negative or non-finite prices become 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def coerce_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def extract_product_id(item: Mapping) -> int:
    for key in PRODUCT_ID_KEYS:
        if item.get(key) is not None:
            return parse_positive_int(item[key], "productId")
    raise ValidationException("Item must have a product id", field="productId")


def normalize_line_input(item: Any) -> dict:
    """
    Turn an arbitrary client-supplied line into store column values.

    Args:
        item: Mapping with productId (or product_id / id), title, price, image, quantity

    Returns:
        dict with product_id, title, price, image, quantity

    Raises:
        ValidationException: If item is not a mapping or lacks a valid product id

    Example:
        >>> normalize_line_input({"productId": "42", "title": " Mug ", "price": None})
        {'product_id': 42, 'title': 'Mug', 'price': 0.0, 'image': '', 'quantity': 1}
    """
    if hasattr(item, "model_dump"):
        item = item.model_dump(by_alias=True)
    if not isinstance(item, Mapping):
        raise ValidationException("Cart item must be an object", field="items")

    return {
        "product_id": extract_product_id(item),
        "title": coerce_text(item.get("title")),
        "price": coerce_price(item.get("price")),
        "image": coerce_text(item.get("image")),
        "quantity": coerce_quantity(item.get("quantity")),
    }


def require_email(email: Any) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationException("Valid email is required", field="email")
    return email.strip()

"""
Request records for the menu procedures.

Each ``parse_*`` function is pure: it takes the raw mapping received from a
form or a JSON body and returns ``(record, errors)``. ``record`` is None when
``errors`` is not empty. Field names accept both the wire spelling
(``orderCount``) and the form spelling (``order_count``).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class CreateMenuItemRequest:
    name: str
    price: str
    category: str
    discount: int = 0
    order_count: int = 0


@dataclass(frozen=True)
class UpdateMenuItemRequest:
    """Partial update. ``changes`` holds only the fields that were provided."""
    id: str
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateCategoryRequest:
    category: str


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    return str(value).strip()


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def coerce_count(value: Any, label: str, errors: List[str]) -> int:
    """
    Coerce a discount/order-count value to a non-negative int.

    Missing or blank -> 0, negative -> 0, non-numeric -> error (returns 0).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    if isinstance(value, bool):
        errors.append(f'{label} must be a number')
        return 0
    try:
        number = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        errors.append(f'{label} must be a number')
        return 0
    return max(number, 0)


def parse_create_menu_item(data: Mapping[str, Any]) -> Tuple[Optional[CreateMenuItemRequest], List[str]]:
    errors: List[str] = []
    name = _text(data, 'name')
    price = _text(data, 'price')
    category = _text(data, 'category')

    if not name:
        errors.append('Name is required')
    if not price:
        errors.append('Price is required')
    if not category:
        errors.append('Category is required')

    discount = coerce_count(data.get('discount'), 'Discount', errors)
    order_count = coerce_count(_pick(data, 'orderCount', 'order_count'), 'Order count', errors)

    if errors:
        return None, errors
    return CreateMenuItemRequest(
        name=name,
        price=price,
        category=category,
        discount=discount,
        order_count=order_count,
    ), []


def parse_update_menu_item(item_id: Any, data: Mapping[str, Any]) -> Tuple[Optional[UpdateMenuItemRequest], List[str]]:
    """Only keys present in ``data`` end up in ``changes``."""
    errors: List[str] = []
    item_id = '' if item_id is None else str(item_id).strip()
    if not item_id:
        errors.append('ID is required')

    changes: Dict[str, Any] = {}
    for key in ('name', 'price', 'category'):
        if key in data and data[key] is not None:
            value = str(data[key]).strip()
            if not value:
                errors.append(f'{key.capitalize()} cannot be empty')
            changes[key] = value
    if 'discount' in data and data['discount'] is not None:
        changes['discount'] = coerce_count(data['discount'], 'Discount', errors)
    order_count = _pick(data, 'orderCount', 'order_count')
    if order_count is not None:
        changes['order_count'] = coerce_count(order_count, 'Order count', errors)

    if errors:
        return None, errors
    return UpdateMenuItemRequest(id=item_id, changes=changes), []


def parse_create_category(data: Mapping[str, Any]) -> Tuple[Optional[CreateCategoryRequest], List[str]]:
    category = _text(data, 'category')
    if not category:
        return None, ['Category name is required']
    return CreateCategoryRequest(category=category), []

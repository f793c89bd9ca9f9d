"""Grouping and lookup helpers used by the menu, search and admin pages."""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

UNCATEGORIZED = 'Uncategorized'


@dataclass
class CategoryGroup:
    key: str
    display_name: str
    items: List[Any] = field(default_factory=list)


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an ORM row."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def group_by_category(items: Iterable[Any], categories: Iterable[Any]) -> List[CategoryGroup]:
    """
    Group items by their category id, in order of first appearance.

    The display name comes from the matching category; an id with no match
    is shown as-is, and a missing id goes to "Uncategorized".
    """
    names: Dict[str, str] = {}
    for category in categories:
        category_id = _field(category, 'id')
        if category_id not in names:
            names[category_id] = _field(category, 'category')

    groups: Dict[str, CategoryGroup] = {}
    for item in items:
        key = _field(item, 'category') or UNCATEGORIZED
        group = groups.get(key)
        if group is None:
            group = CategoryGroup(key=key, display_name=names.get(key) or key)
            groups[key] = group
        group.items.append(item)
    return list(groups.values())


def filter_by_name(items: Iterable[Any], query: Optional[str]) -> List[Any]:
    """Case-insensitive substring filter; an empty query keeps everything."""
    needle = (query or '').strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in (_field(item, 'name') or '').lower()]


def discounted_price(price: Any, discount: Any) -> str:
    """Price after a percentage discount, two decimals. Unparseable prices are returned unchanged."""
    try:
        percent = max(int(discount or 0), 0)
    except (TypeError, ValueError):
        percent = 0
    try:
        amount = Decimal(str(price).strip().replace(',', '.'))
        if percent:
            amount = amount * (Decimal(100) - Decimal(min(percent, 100))) / Decimal(100)
        return str(amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return '' if price is None else str(price)

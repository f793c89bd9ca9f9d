"""
Catalog service: menu items and categories.

Every function takes the SQLAlchemy session explicitly. Mutations commit and
invalidate the cached list reads so the next read sees the change.
"""
import logging
import secrets
import string
from typing import List, Optional, Mapping, Any, Dict

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from flask import current_app

from app.models import MenuItem, Category
from app.exceptions import ValidationError
from app.blueprints.metrics import record_menu_mutation
from app.services.menu_requests import (
    parse_create_menu_item, parse_update_menu_item, parse_create_category
)

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits + '_-'
ID_SIZE = 21

MENU_CACHE_MODULE = 'menu'
CATEGORIES_CACHE_MODULE = 'categories'


def generate_id(size: int = ID_SIZE) -> str:
    """URL-safe random identifier (same alphabet and size as nanoid)."""
    return ''.join(secrets.choice(ID_ALPHABET) for _ in range(size))


def _fresh_id(session, model) -> str:
    new_id = generate_id()
    while session.get(model, new_id) is not None:
        new_id = generate_id()
    return new_id


def _invalidate(module: str) -> None:
    try:
        from app.services.cache_service import get_cache
        get_cache().invalidate_module(module)
    except Exception as e:
        logger.debug(f"[CACHE] Invalidate skipped for {module}: {e}")


def _commit(session) -> None:
    """Commit, turning a broken category reference into a ValidationError."""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Integrity error on menu write: {e.orig}")
        raise ValidationError('Category does not exist')


def _raise_if_errors(errors: List[str]) -> None:
    if errors:
        raise ValidationError(", ".join(errors), errors)


# ----------------------
# Menu items
# ----------------------

def list_all(session) -> List[MenuItem]:
    """All menu items, newest-looking identifiers first."""
    return session.query(MenuItem).order_by(MenuItem.id.desc()).all()


def find_by_name(session, name: str) -> List[MenuItem]:
    """Case-insensitive partial match on the item name."""
    name = (name or '').strip()
    if not name:
        raise ValidationError('Name is required')
    return session.query(MenuItem).filter(
        func.lower(MenuItem.name).contains(name.lower(), autoescape=True)
    ).order_by(MenuItem.id.desc()).all()


def get_by_id(session, item_id: str) -> Optional[MenuItem]:
    if not item_id:
        return None
    return session.get(MenuItem, item_id)


def create(session, fields: Mapping[str, Any]) -> MenuItem:
    """
    Create a menu item.

    Raises:
        ValidationError: if name, price or category is missing
    """
    request, errors = parse_create_menu_item(fields)
    _raise_if_errors(errors)

    item = MenuItem(
        id=_fresh_id(session, MenuItem),
        name=request.name,
        price=request.price,
        discount=request.discount,
        order_count=request.order_count,
        category=request.category,
    )
    session.add(item)
    _commit(session)
    _invalidate(MENU_CACHE_MODULE)
    record_menu_mutation('create')

    logger.info(f"Menu item created: {item.id} ({item.name})")
    return item


def update(session, item_id: str, fields: Mapping[str, Any]) -> Optional[MenuItem]:
    """
    Apply only the provided fields.

    Returns None when the item does not exist; callers branch on it.
    """
    request, errors = parse_update_menu_item(item_id, fields)
    _raise_if_errors(errors)

    item = get_by_id(session, request.id)
    if item is None:
        logger.info(f"Menu item update skipped, not found: {request.id}")
        return None

    for key, value in request.changes.items():
        setattr(item, key, value)
    _commit(session)
    _invalidate(MENU_CACHE_MODULE)
    record_menu_mutation('update')

    logger.info(f"Menu item updated: {item.id} fields={sorted(request.changes)}")
    return item


def delete(session, item_id: str) -> Optional[MenuItem]:
    """Delete an item and return the removed row, or None when absent."""
    if not item_id or not str(item_id).strip():
        raise ValidationError('ID is required')

    item = get_by_id(session, str(item_id).strip())
    if item is None:
        return None

    session.delete(item)
    session.commit()
    _invalidate(MENU_CACHE_MODULE)
    record_menu_mutation('delete')

    logger.info(f"Menu item deleted: {item.id}")
    return item


# ----------------------
# Categories
# ----------------------

def list_categories(session) -> List[Category]:
    return session.query(Category).order_by(Category.id.desc()).all()


def get_category_by_id(session, category_id: str) -> Optional[Category]:
    if not category_id:
        return None
    return session.get(Category, category_id)


def create_category(session, name: Any) -> Category:
    """Create a category. ``name`` is the display name or a ``{category}`` mapping."""
    data = name if isinstance(name, Mapping) else {'category': name}
    request, errors = parse_create_category(data)
    _raise_if_errors(errors)

    category = Category(id=_fresh_id(session, Category), category=request.category)
    session.add(category)
    session.commit()
    _invalidate(CATEGORIES_CACHE_MODULE)
    record_menu_mutation('create_category')

    logger.info(f"Category created: {category.id} ({category.category})")
    return category


# ----------------------
# Cached list reads (wire shape)
# ----------------------

def list_all_cached(session) -> List[Dict[str, Any]]:
    """``list_all`` as dicts, served from Redis when available."""
    from app.services.cache_service import get_cache
    ttl = current_app.config.get('CACHE_MENU_TTL', 60)
    return get_cache().memoize(
        MENU_CACHE_MODULE, 'all',
        lambda: [item.to_dict() for item in list_all(session)],
        ttl
    )


def list_categories_cached(session) -> List[Dict[str, Any]]:
    from app.services.cache_service import get_cache
    ttl = current_app.config.get('CACHE_CATEGORIES_TTL', 300)
    return get_cache().memoize(
        CATEGORIES_CACHE_MODULE, 'all',
        lambda: [category.to_dict() for category in list_categories(session)],
        ttl
    )

"""Models package - exports all SQLAlchemy models."""
from app.models.app_user import AppUser
from app.models.category import Category
from app.models.menu_item import MenuItem

__all__ = ['AppUser', 'Category', 'MenuItem']

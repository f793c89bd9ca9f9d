"""
Unit tests for SQLAlchemy models.
"""

import pytest
from app.models import AppUser, Category, MenuItem


class TestAppUserModel:
    """Tests for AppUser model."""

    def test_create_user(self, session):
        user = AppUser(email='someone@test.com', full_name='Someone', active=True)
        user.set_password('password123')
        session.add(user)
        session.commit()

        assert user.id is not None
        assert user.password_hash != 'password123'

    def test_password_check(self):
        user = AppUser(email='someone@test.com')
        user.set_password('password123')

        assert user.check_password('password123')
        assert not user.check_password('wrong')

    def test_user_without_password_cannot_log_in(self):
        assert not AppUser(email='someone@test.com').check_password('')

    def test_email_unique(self, session, customer):
        session.add(AppUser(email=customer.email))

        with pytest.raises(Exception):  # IntegrityError
            session.commit()


class TestMenuModels:
    """Tests for Category and MenuItem."""

    def test_category_to_dict(self, category):
        assert category.to_dict() == {'id': 'cat-appetizers', 'category': 'Appetizers'}

    def test_menu_item_to_dict(self, menu_item):
        assert menu_item.to_dict() == {
            'id': 'item-bread',
            'name': 'Garlic Bread',
            'price': '4.50',
            'discount': 10,
            'orderCount': 3,
            'category': 'cat-appetizers',
        }

    def test_counters_default_to_zero(self, session, category):
        item = MenuItem(id='item-soup', name='Soup', price='5', category=category.id)
        session.add(item)
        session.commit()

        assert item.discount == 0
        assert item.order_count == 0

    def test_negative_discount_rejected(self, session, category):
        session.add(MenuItem(id='item-bad', name='Bad', price='1', discount=-5, category=category.id))

        with pytest.raises(Exception):  # IntegrityError
            session.commit()

"""
Integration tests for the HTML pages: menu, cart, admin and worker.
"""

import json

import pytest
from app.models import MenuItem, Category
from app.services.cart_service import decode_cart, CartLine


def _cart(client):
    with client.session_transaction() as sess:
        return decode_cart(sess.get('cart'))


class TestMenuPage:
    """Customer menu browse and search."""

    def test_menu_groups_items_by_category(self, authenticated_client, menu_item):
        response = authenticated_client.get('/menu')

        assert response.status_code == 200
        assert b'Appetizers' in response.data
        assert b'Garlic Bread' in response.data
        assert b'4.05' in response.data

    def test_empty_menu(self, authenticated_client, session):
        response = authenticated_client.get('/menu')

        assert b'No categories found' in response.data

    def test_category_without_items_is_not_listed(self, authenticated_client, category):
        response = authenticated_client.get('/menu')

        assert b'Appetizers' not in response.data
        assert b'No categories found' in response.data

    def test_menu_shows_stepper_for_items_in_cart(self, authenticated_client, menu_item, set_client_cart):
        set_client_cart(authenticated_client, [(menu_item.id, 2)])

        response = authenticated_client.get('/menu')

        assert b'Cart (2)' in response.data
        assert b'value="-1"' in response.data

    def test_search(self, authenticated_client, menu_item):
        response = authenticated_client.get('/menu/search?q=bread')

        assert response.status_code == 200
        assert b'Garlic Bread' in response.data

    def test_search_filters_by_name(self, authenticated_client, session, menu_item):
        session.add(MenuItem(id='item-soup', name='Tomato Soup', price='5', category=menu_item.category))
        session.commit()

        response = authenticated_client.get('/menu/search?q=SOUP')

        assert b'Tomato Soup' in response.data
        assert b'Garlic Bread' not in response.data

    def test_search_htmx_returns_partial(self, authenticated_client, menu_item):
        response = authenticated_client.get('/menu/search?q=zzz', headers={'HX-Request': 'true'})

        assert response.status_code == 200
        assert b'Garlic Bread' not in response.data
        assert b'<html' not in response.data


class TestCartPages:
    """Cart update and cart view."""

    def test_add_then_increment(self, client, menu_item):
        client.post('/cart/update', data={'item': menu_item.id, 'delta': '1'})
        client.post('/cart/update', data={'item': menu_item.id, 'delta': '1'})

        assert _cart(client) == [CartLine(menu_item.id, 2)]

    def test_decrement_last_unit_removes_line(self, client, set_client_cart):
        set_client_cart(client, [('pizza', 1), ('salad', 3)])

        client.post('/cart/update', data={'item': 'pizza', 'delta': '-1'})

        assert _cart(client) == [CartLine('salad', 3)]

    def test_json_update_returns_lines(self, client):
        response = client.post('/cart/update', json={'item': 'pizza', 'delta': 2})

        assert response.get_json() == {'lines': [{'item': 'pizza', 'quantity': 2}], 'count': 2}

    def test_update_redirects_to_next(self, client):
        response = client.post('/cart/update', data={'item': 'pizza', 'delta': '1', 'next': '/menu'})

        assert response.status_code == 302
        assert response.location.endswith('/menu')

    @pytest.mark.parametrize('payload,message', [
        ({'delta': 1}, 'Item is required'),
        ({'item': 'pizza', 'delta': 'x'}, 'Quantity change must be an integer'),
        ({'item': 'pizza', 'delta': 0}, 'Quantity change cannot be zero'),
    ])
    def test_bad_update_is_rejected(self, client, payload, message):
        response = client.post('/cart/update', json=payload)

        assert response.status_code == 400
        assert response.get_json()['message'] == message

    def test_view_lists_names_and_unknown(self, client, menu_item, set_client_cart):
        set_client_cart(client, [(menu_item.id, 1), ('gone', 2)])

        response = client.get('/cart/')

        assert response.status_code == 200
        assert b'Garlic Bread' in response.data
        assert b'Unknown' in response.data
        assert b'Proceed Payment' in response.data

    def test_empty_cart_view(self, client, session):
        response = client.get('/cart/')

        assert b'Your cart is empty' in response.data

    def test_corrupt_cart_is_treated_as_empty(self, client, session):
        with client.session_transaction() as sess:
            sess['cart'] = '{not json'

        response = client.get('/cart/lines')

        assert response.get_json() == {'lines': [], 'count': 0}


class TestAdminPages:
    """Admin menu management."""

    def test_index_lists_items(self, admin_client, menu_item):
        response = admin_client.get('/admin/')

        assert response.status_code == 200
        assert b'Garlic Bread' in response.data
        assert b'Appetizers' in response.data

    def test_create_item(self, admin_client, session, category):
        response = admin_client.post('/admin/items/new', data={
            'name': 'Soup',
            'price': '5.00',
            'discount': '0',
            'order_count': '0',
            'category': category.id,
        })

        assert response.status_code == 302
        assert session.query(MenuItem).filter_by(name='Soup').count() == 1

    def test_create_item_without_name_is_rejected(self, admin_client, session, category):
        response = admin_client.post('/admin/items/new', data={
            'name': '',
            'price': '5.00',
            'category': category.id,
        })

        assert response.status_code == 400
        assert session.query(MenuItem).count() == 0

    def test_edit_item(self, admin_client, session, menu_item):
        response = admin_client.post(f'/admin/items/{menu_item.id}/edit', data={
            'name': 'Cheesy Bread',
            'price': '5.50',
            'discount': '0',
            'order_count': '3',
            'category': menu_item.category,
        })

        assert response.status_code == 302
        session.expire_all()
        assert session.get(MenuItem, menu_item.id).name == 'Cheesy Bread'

    def test_edit_missing_item_is_404(self, admin_client, session):
        assert admin_client.get('/admin/items/missing/edit').status_code == 404

    def test_delete_item(self, admin_client, session, menu_item):
        response = admin_client.post(f'/admin/items/{menu_item.id}/delete')

        assert response.status_code == 302
        assert session.query(MenuItem).count() == 0

    def test_create_category_opens_item_form(self, admin_client, session):
        response = admin_client.post('/admin/categories/new', data={'category': 'Drinks'})

        created = session.query(Category).filter_by(category='Drinks').one()
        assert response.status_code == 302
        assert f'category={created.id}' in response.location


class TestWorkerPage:
    """Worker board."""

    def test_worker_sees_board(self, worker_client, menu_item):
        response = worker_client.get('/worker/')

        assert response.status_code == 200
        assert b'3 orders' in response.data

    def test_admin_can_open_worker_board(self, admin_client, session):
        assert admin_client.get('/worker/').status_code == 200

    def test_customer_is_redirected(self, authenticated_client):
        response = authenticated_client.get('/worker/')

        assert response.status_code == 302
        assert response.location.endswith('/menu')


class TestOperationalEndpoints:
    """Health and metrics."""

    def test_health(self, client, session):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()['database'] == 'connected'

    def test_cache_health_degrades_without_redis(self, client):
        response = client.get('/health/cache')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'degraded'

    def test_metrics_exposes_cart_counter(self, client):
        client.post('/cart/update', json={'item': 'pizza', 'delta': 1})

        response = client.get('/metrics')

        assert response.status_code == 200
        assert b'restaurant_cart_updates_total' in response.data

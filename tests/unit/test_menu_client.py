"""
Unit tests for the HTTP client of the JSON procedures (requests is mocked).
"""

from unittest.mock import MagicMock

import pytest
import requests

from app.exceptions import TransportError, ValidationError
from app.services.menu_client import MenuClient


def _response(status_code, body=None):
    response = MagicMock()
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return MenuClient('http://shop.local/', session=http, timeout=5)


class TestMenuClient:

    def test_get_all(self, client, http):
        http.request.return_value = _response(200, [{'id': 'a'}])

        assert client.get_all() == [{'id': 'a'}]
        http.request.assert_called_once_with('GET', 'http://shop.local/api/menu', timeout=5)

    def test_get_by_name_sends_query(self, client, http):
        http.request.return_value = _response(200, [])

        client.get_by_name('pizza')

        http.request.assert_called_once_with(
            'GET', 'http://shop.local/api/menu/search', timeout=5, params={'name': 'pizza'}
        )

    def test_update_missing_item_returns_none(self, client, http):
        http.request.return_value = _response(200, None)
        http.request.return_value.json.side_effect = None
        http.request.return_value.json.return_value = None

        assert client.update('nope', price='3') is None

    def test_create_category(self, client, http):
        http.request.return_value = _response(201, {'id': 'c1', 'category': 'Drinks'})

        assert client.create_category('Drinks') == {'id': 'c1', 'category': 'Drinks'}
        http.request.assert_called_once_with(
            'POST', 'http://shop.local/api/categories', timeout=5, json={'category': 'Drinks'}
        )

    def test_validation_error_is_raised_as_such(self, client, http):
        http.request.return_value = _response(400, {'message': 'Name is required', 'errors': ['Name is required']})

        with pytest.raises(ValidationError) as exc:
            client.create(name='', price='1', category='c')
        assert exc.value.errors == ['Name is required']

    def test_network_failure_is_transport_error(self, client, http):
        http.request.side_effect = requests.ConnectionError('refused')

        with pytest.raises(TransportError) as exc:
            client.get_all()
        assert exc.value.message == 'Something went wrong'

    def test_server_error_is_transport_error(self, client, http):
        http.request.return_value = _response(500, {'status': 'error'})

        with pytest.raises(TransportError) as exc:
            client.get_menu_item_by_id('a')
        assert exc.value.status_code == 500

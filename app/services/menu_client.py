"""HTTP client for the menu/cart JSON procedures (kiosks, worker screens, scripts)."""
import logging
from typing import Any, Dict, List, Optional

import requests

from app.exceptions import TransportError, ValidationError

logger = logging.getLogger(__name__)


class MenuClient:
    """Thin client over ``/api``. Network and server failures raise TransportError."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.http = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/api{path}"
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"[RPC] {method} {url} failed: {e}")
            raise TransportError() from e

        if response.status_code == 400:
            body = self._json(response) or {}
            raise ValidationError(body.get('message', 'Invalid request'), body.get('errors'))

        if response.status_code >= 400:
            logger.error(f"[RPC] {method} {url} -> {response.status_code}")
            raise TransportError(status_code=response.status_code)

        return self._json(response)

    @staticmethod
    def _json(response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    # menu.*

    def get_all(self) -> List[Dict[str, Any]]:
        return self._call('GET', '/menu')

    def get_by_name(self, name: str) -> List[Dict[str, Any]]:
        return self._call('GET', '/menu/search', params={'name': name})

    def create(self, **fields) -> Dict[str, Any]:
        return self._call('POST', '/menu', json=fields)

    def update(self, item_id: str, **fields) -> Optional[Dict[str, Any]]:
        return self._call('PATCH', f'/menu/{item_id}', json=fields)

    def delete(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self._call('DELETE', f'/menu/{item_id}')

    def get_many_categories(self) -> List[Dict[str, Any]]:
        return self._call('GET', '/categories')

    def get_category_by_id(self, category_id: str) -> Optional[Dict[str, Any]]:
        return self._call('GET', f'/categories/{category_id}')

    def create_category(self, category: str) -> Dict[str, Any]:
        return self._call('POST', '/categories', json={'category': category})

    # cart.*

    def get_menu_item_by_id(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self._call('GET', f'/cart/items/{item_id}')

"""
Unit tests for the Redis cache service (Redis is mocked).
"""

from unittest.mock import MagicMock, patch

import pytest
from flask import Flask
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.cache_service import CacheService


def _flask_app(**overrides):
    app = Flask(__name__)
    config = {
        'CACHE_ENABLED': True,
        'CACHE_KEY_PREFIX': 'test',
        'REDIS_URL': 'redis://localhost:6379/0',
        'CACHE_DEFAULT_TTL': 60,
    }
    config.update(overrides)
    app.config.update(config)
    return app


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.ping.return_value = True
    return client


@pytest.fixture
def cache(redis_client):
    app = _flask_app()
    with patch('app.services.cache_service.redis.from_url', return_value=redis_client):
        service = CacheService(app)
    with app.app_context():
        yield service


class TestCacheService:

    def test_disabled_by_config(self):
        service = CacheService(_flask_app(CACHE_ENABLED=False))

        assert service.is_available() is False
        assert service.get('menu', 'all') is None
        assert service.set('menu', 'all', []) is False

    def test_connection_failure_disables_cache(self, redis_client):
        redis_client.ping.side_effect = RedisConnectionError('down')
        with patch('app.services.cache_service.redis.from_url', return_value=redis_client):
            service = CacheService(_flask_app())

        assert service.is_available() is False

    def test_set_uses_prefixed_key_and_ttl(self, cache, redis_client):
        assert cache.set('menu', 'all', [{'id': 'a'}], ttl=30) is True

        redis_client.setex.assert_called_once_with('test:menu:all', 30, '[{"id": "a"}]')

    def test_get_reads_prefixed_key(self, cache, redis_client):
        redis_client.get.return_value = '[{"id": "a", "price": "4.50", "discount": 10}]'

        assert cache.get('menu', 'all') == [{'id': 'a', 'price': '4.50', 'discount': 10}]
        redis_client.get.assert_called_with('test:menu:all')

    def test_memoize_loads_on_miss(self, cache, redis_client):
        redis_client.get.return_value = None
        loader = MagicMock(return_value=[{'id': 'a'}])

        assert cache.memoize('menu', 'all', loader, ttl=10) == [{'id': 'a'}]
        loader.assert_called_once()
        redis_client.setex.assert_called_once()

    def test_memoize_serves_hit_without_loading(self, cache, redis_client):
        redis_client.get.return_value = '[]'
        loader = MagicMock()

        assert cache.memoize('menu', 'all', loader) == []
        loader.assert_not_called()

    def test_invalidate_module_scans_and_deletes(self, cache, redis_client):
        redis_client.scan.return_value = (0, ['test:menu:all', 'test:menu:x'])
        pipeline = MagicMock()
        redis_client.pipeline.return_value = pipeline

        assert cache.invalidate_module('menu') == 2
        redis_client.scan.assert_called_with(0, match='test:menu:*', count=100)
        assert pipeline.delete.call_count == 2
        pipeline.execute.assert_called_once()

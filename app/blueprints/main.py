"""Main blueprint with health check endpoints."""
from flask import Blueprint, jsonify
from sqlalchemy import text
from app.database import get_session

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """
    Health check endpoint that validates database connection.

    Returns:
        200: Healthy (DB connected)
        500: Unhealthy (DB error)
    """
    try:
        session = get_session()
        row = session.execute(text("SELECT 1 as health_check")).fetchone()

        if row and row[0] == 1:
            return jsonify({
                'status': 'healthy',
                'database': 'connected',
                'message': 'Database connection successful'
            }), 200
        return jsonify({
            'status': 'unhealthy',
            'database': 'error',
            'message': 'Unexpected query result'
        }), 500

    except Exception as e:
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(e),
            'message': 'Failed to connect to database'
        }), 500


@main_bp.route('/health/cache')
def health_cache():
    """
    Cache health check endpoint.

    Never returns 500: without Redis the menu is read straight from the
    database and the status is "degraded".
    """
    try:
        from app.services.cache_service import get_cache
        cache = get_cache()

        if cache.is_available():
            cache.set("system", "health_check", {"test": "ok"}, ttl=10)
            result = cache.get("system", "health_check")

            if result and result.get('test') == 'ok':
                return jsonify({
                    'status': 'ok',
                    'cache': 'connected',
                    'redis': 'healthy',
                    'message': 'Cache is working correctly'
                }), 200
            return jsonify({
                'status': 'degraded',
                'cache': 'error',
                'redis': 'connected_but_failing',
                'message': 'Redis connected but operations failing'
            }), 200

        return jsonify({
            'status': 'degraded',
            'cache': 'unavailable',
            'redis': 'disconnected',
            'message': 'Cache disabled or Redis unavailable (app continues without cache)'
        }), 200

    except Exception as e:
        return jsonify({
            'status': 'degraded',
            'cache': 'error',
            'redis': 'unknown',
            'error': str(e),
            'message': 'Cache health check failed (app continues without cache)'
        }), 200

"""Middleware for authentication and principal context."""
from functools import wraps
from flask import session, g, redirect, url_for, flash, request, jsonify
from app.database import get_session
from app.models import AppUser


def _wants_json():
    return request.path.startswith('/api/') or request.is_json


def load_user():
    """
    Load current user and principal role into g (Flask's per-request global).

    Sets g.user and g.user_role ('admin', 'worker' or 'customer') if authenticated.
    """
    g.user = None
    g.user_role = None

    try:
        user_id = session.get('user_id')
        if user_id:
            db_session = get_session()
            user = db_session.query(AppUser).filter_by(id=user_id, active=True).first()
            if user:
                from app.services.auth_service import resolve_role
                g.user = user
                g.user_role = resolve_role(user.email)
            else:
                session.pop('user_id', None)
    except Exception as e:
        # Avoid crashing the whole app if context loading fails
        from flask import current_app
        current_app.logger.error(f"Error in load_user: {e}")


def require_login(f):
    """
    Decorator: Require user to be logged in.

    Redirects to login page if not authenticated; JSON procedures get a 401.
    Handles HTMX requests with an HX-Redirect header.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.user is None:
            if _wants_json():
                return jsonify({'status': 'error', 'message': 'Authentication required'}), 401

            if request.headers.get('HX-Request'):
                response = redirect(url_for('auth.login', next=request.referrer or request.url))
                response.headers['HX-Redirect'] = url_for('auth.login', next=request.referrer or request.url)
                return response

            flash('Please sign in to continue.', 'warning')
            return redirect(url_for('auth.login', next=request.url))
        return f(*args, **kwargs)
    return decorated_function


def require_role(*roles):
    """
    Decorator: Require one of the given principal roles.

    Must be used AFTER require_login.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.user_role not in roles:
                if _wants_json():
                    return jsonify({'status': 'error', 'message': 'Unauthorized access'}), 403
                flash('You do not have access to that page.', 'danger')
                from app.services.auth_service import landing_endpoint
                return redirect(url_for(landing_endpoint(g.user)))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


require_admin = require_role('admin')

"""Flask application factory."""
from flask import Flask, render_template, request, redirect, flash, jsonify
from flask_wtf.csrf import CSRFProtect
from app.database import init_db
import os


def _wants_json():
    return request.is_json or request.path.startswith('/api/')


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize CSRF protection; the JSON procedures are called with fetch/MenuClient
    csrf = CSRFProtect(app)

    from flask_wtf.csrf import CSRFError

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        if request.is_json or request.headers.get('HX-Request'):
            return jsonify({'status': 'error', 'message': 'Your session expired. Reload the page.'}), 400
        flash('Your session expired or the form was invalid. Please try again.', 'warning')
        return redirect(request.referrer or '/')

    # Sentry error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis read cache for menu/category lists
    from app.services.cache_service import init_cache
    init_cache(app)

    # Prometheus request metrics
    from app.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database
    init_db(app)

    # Template helpers
    from app.services.menu_presentation import discounted_price
    app.jinja_env.globals['discounted_price'] = discounted_price

    # Load the signed-in principal before each request
    from app.middleware import load_user

    @app.before_request
    def before_request_handler():
        load_user()

    # Error Handlers
    from app.exceptions import RestaurantError

    @app.errorhandler(RestaurantError)
    def handle_restaurant_error(error):
        """Handle custom application exceptions."""
        app.logger.warning(f"RestaurantError [{error.status_code}]: {error.message}")

        if _wants_json():
            return jsonify(error.to_dict()), error.status_code

        if request.headers.get('HX-Request') == 'true':
            return render_template('partials/_alert.html', message=error.message), error.status_code

        # For regular requests: flash message and redirect back
        flash(error.message, 'danger')
        return redirect(request.referrer or '/')

    @app.errorhandler(404)
    def not_found_error(error):
        if _wants_json():
            return jsonify({'status': 'error', 'message': 'Not Found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        from werkzeug.exceptions import HTTPException
        if isinstance(error, HTTPException) and error.code != 500:
            return error

        import traceback
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")

        if _wants_json():
            return jsonify({'status': 'error', 'message': 'Something went wrong'}), 500

        return render_template('errors/500.html'), 500

    # Register blueprints
    from app.blueprints.auth import auth_bp
    from app.blueprints.main import main_bp
    from app.blueprints.api import api_bp
    from app.blueprints.shop import shop_bp
    from app.blueprints.cart import cart_bp
    from app.blueprints.admin import admin_bp
    from app.blueprints.worker import worker_bp
    from app.blueprints.metrics import metrics_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(worker_bp)
    app.register_blueprint(metrics_bp)

    # JSON procedures authenticate with the session cookie and send JSON bodies
    csrf.exempt(api_bp)
    app.register_blueprint(api_bp)

    # Register CLI commands
    from app.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"Database: {app.config.get('SQLALCHEMY_DATABASE_URI', '').split('@')[-1]}")

    return app

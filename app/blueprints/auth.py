"""
Authentication blueprint.
Handles registration, login, logout and routing by principal.
"""

from flask import Blueprint, render_template, request, redirect, url_for, flash, session, g, Response, current_app
from typing import Union
import logging
from app.database import db_session
from app.exceptions import ValidationError
from app.services import auth_service

logger = logging.getLogger(__name__)


auth_bp = Blueprint('auth', __name__)


def _start_session(user) -> None:
    # Keep the cart: it belongs to the browser, not to the account.
    cart_key = current_app.config.get('CART_STORAGE_KEY', 'cart')
    cart = session.get(cart_key)
    session.clear()
    if cart is not None:
        session[cart_key] = cart
    session['user_id'] = user.id
    session.permanent = True


@auth_bp.route('/')
def index() -> Response:
    """Send each principal to its landing page."""
    return redirect(url_for(auth_service.landing_endpoint(g.user)))


@auth_bp.route('/register', methods=['GET', 'POST'])
def register() -> Union[str, Response]:
    """Registration page - creates a customer account and signs it in."""
    if g.user:
        return redirect(url_for(auth_service.landing_endpoint(g.user)))

    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        full_name = request.form.get('full_name', '').strip()
        password = request.form.get('password', '')
        password_confirm = request.form.get('password_confirm', '')

        if password != password_confirm:
            flash('Passwords do not match.', 'danger')
            return render_template('auth/register.html', email=email, full_name=full_name), 400

        try:
            user = auth_service.register_user(db_session, email, password, full_name)
        except ValidationError as e:
            flash(e.message, 'danger')
            return render_template('auth/register.html', email=email, full_name=full_name), 400

        _start_session(user)
        flash(f'Welcome, {user.full_name or user.email}!', 'success')
        return redirect(url_for(auth_service.landing_endpoint(user)))

    return render_template('auth/register.html', email='', full_name='')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login() -> Union[str, Response]:
    """Login page - validates email + password."""
    if g.user:
        return redirect(url_for(auth_service.landing_endpoint(g.user)))

    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        next_url = request.args.get('next')

        if not email or not password:
            flash('Email and password are required.', 'danger')
            return render_template('auth/login.html', email=email), 400

        user = auth_service.authenticate(db_session, email, password)
        if user is None:
            flash('Invalid email or password.', 'danger')
            return render_template('auth/login.html', email=email), 401

        _start_session(user)
        logger.info(f"User {user.id} signed in as {auth_service.resolve_role(user.email)}")
        if next_url and next_url.startswith('/') and not next_url.startswith('//'):
            return redirect(next_url)
        return redirect(url_for(auth_service.landing_endpoint(user)))

    return render_template('auth/login.html', email='')


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout() -> Response:
    """Logout endpoint - clear the account from the session and go to login."""
    session.pop('user_id', None)
    return redirect(url_for('auth.login', logged_out='1'))

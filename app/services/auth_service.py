"""
Authentication service.

Handles account creation, credential checks and principal resolution.
The principal is derived from the email: ADMIN_EMAIL is the admin,
WORKER_EMAIL is the worker, everyone else is a customer.
"""
import logging
import re

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from app.models import AppUser
from app.exceptions import ValidationError

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'admin'
ROLE_WORKER = 'worker'
ROLE_CUSTOMER = 'customer'

LANDING_ENDPOINTS = {
    ROLE_ADMIN: 'admin.index',
    ROLE_WORKER: 'worker.index',
    ROLE_CUSTOMER: 'shop.menu',
}

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def is_valid_email(email: str) -> bool:
    """Validate email format."""
    return re.match(EMAIL_PATTERN, email or '') is not None


def _same_email(a, b) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


def resolve_role(email) -> str:
    """Principal role for an email address."""
    if _same_email(email, current_app.config.get('ADMIN_EMAIL')):
        return ROLE_ADMIN
    if _same_email(email, current_app.config.get('WORKER_EMAIL')):
        return ROLE_WORKER
    return ROLE_CUSTOMER


def landing_endpoint(user) -> str:
    """Endpoint a principal lands on after login; anonymous visitors get the menu."""
    if user is None:
        return LANDING_ENDPOINTS[ROLE_CUSTOMER]
    return LANDING_ENDPOINTS[resolve_role(user.email)]


def find_user_by_email(session, email):
    return session.query(AppUser).filter(
        func.lower(AppUser.email) == (email or '').strip().lower()
    ).first()


def authenticate(session, email, password):
    """Return the active user matching the credentials, or None."""
    user = find_user_by_email(session, email)
    if not user or not user.active:
        logger.info(f"Login rejected for unknown/inactive account: {email}")
        return None
    if not user.check_password(password):
        logger.info(f"Login rejected, wrong password: {email}")
        return None
    return user


def register_user(session, email, password, full_name=None):
    """
    Create a local account.

    Raises:
        ValidationError: invalid email, short password or duplicate email
    """
    email = (email or '').strip()
    errors = []
    if not is_valid_email(email):
        errors.append('Invalid email.')
    if not password or len(password) < 6:
        errors.append('Password must be at least 6 characters.')
    if errors:
        raise ValidationError(' '.join(errors), errors)

    if find_user_by_email(session, email):
        raise ValidationError('This email is already registered.')

    try:
        user = AppUser(email=email, full_name=(full_name or '').strip() or None, active=True)
        user.set_password(password)
        session.add(user)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Error creating user (IntegrityError): {str(e)}")
        raise ValidationError('This email is already registered.')

    logger.info(f"User registered: {email} role={resolve_role(email)}")
    return user

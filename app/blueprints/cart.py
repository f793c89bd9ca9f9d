"""Cart blueprint: view and adjust the browser's cart."""
from flask import Blueprint, render_template, request, redirect, url_for, jsonify, Response
from typing import Union
import logging
from app.database import get_session
from app.exceptions import ValidationError
from app.services.cart_service import get_session_cart, resolve_cart_names
from app.blueprints.metrics import record_cart_update

logger = logging.getLogger(__name__)

cart_bp = Blueprint('cart', __name__, url_prefix='/cart')


def _cart_payload(cart):
    return {
        'lines': [line.to_dict() for line in cart.lines],
        'count': cart.total_quantity,
    }


def _parse_delta(value) -> int:
    try:
        delta = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError('Quantity change must be an integer')
    if delta == 0:
        raise ValidationError('Quantity change cannot be zero')
    return delta


@cart_bp.route('/')
def view_cart() -> Union[str, Response]:
    """Cart page; item names are looked up one by one, missing items show as Unknown."""
    cart = get_session_cart()
    names = resolve_cart_names(get_session(), cart.lines)
    return render_template('cart/view.html', cart=cart, names=names)


@cart_bp.route('/lines')
def cart_lines() -> Response:
    """Current cart as JSON (lets other open pages re-sync)."""
    return jsonify(_cart_payload(get_session_cart()))


@cart_bp.route('/update', methods=['POST'])
def update_cart() -> Response:
    """Apply +1/-1 (or any non-zero delta) to one item."""
    data = request.get_json(silent=True) if request.is_json else request.form
    data = data or {}
    item_id = str(data.get('item', '')).strip()
    if not item_id:
        raise ValidationError('Item is required')
    delta = _parse_delta(data.get('delta', 1))

    cart = get_session_cart()
    cart.apply_delta(item_id, delta)
    record_cart_update(delta)
    logger.debug(f"Cart update item={item_id} delta={delta} lines={len(cart.lines)}")

    if request.is_json:
        return jsonify(_cart_payload(cart))

    next_url = request.form.get('next', '')
    if next_url.startswith('/') and not next_url.startswith('//'):
        return redirect(next_url)
    return redirect(request.referrer or url_for('cart.view_cart'))

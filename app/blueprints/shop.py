"""Shopper blueprint: grouped menu browse and search."""
from flask import Blueprint, render_template, request, Response
from typing import Union
import logging
from app.database import get_session
from app.middleware import require_login
from app.services import menu_service
from app.services.cart_service import get_session_cart
from app.services.menu_presentation import group_by_category, filter_by_name

logger = logging.getLogger(__name__)

shop_bp = Blueprint('shop', __name__)


@shop_bp.route('/menu')
@require_login
def menu() -> Union[str, Response]:
    """Menu grouped by category, with Add / +/- controls from the cart."""
    session = get_session()
    items = menu_service.list_all_cached(session)
    categories = menu_service.list_categories_cached(session)
    cart = get_session_cart()

    return render_template('menu/index.html',
                           groups=group_by_category(items, categories),
                           quantities=cart.quantities(),
                           cart_count=cart.total_quantity)


@shop_bp.route('/menu/search')
@require_login
def search() -> Union[str, Response]:
    """Search by item name; an empty query lists everything."""
    query = request.args.get('q', '').strip()
    session = get_session()

    items = filter_by_name(menu_service.list_all_cached(session), query)

    cart = get_session_cart()
    is_htmx = request.headers.get('HX-Request') == 'true'
    template = 'menu/_search_results.html' if is_htmx else 'menu/search.html'

    return render_template(template,
                           items=items,
                           query=query,
                           quantities=cart.quantities(),
                           cart_count=cart.total_quantity)

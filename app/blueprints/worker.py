"""Worker blueprint: kitchen/counter view of the menu."""
from flask import Blueprint, render_template, Response
from typing import Union
from app.database import get_session
from app.middleware import require_login, require_role
from app.services import menu_service
from app.services.menu_presentation import group_by_category

worker_bp = Blueprint('worker', __name__, url_prefix='/worker')


@worker_bp.route('/')
@require_login
@require_role('worker', 'admin')
def index() -> Union[str, Response]:
    """Menu grouped by category, most ordered first within each group."""
    session = get_session()
    items = sorted(menu_service.list_all_cached(session),
                   key=lambda item: item['orderCount'], reverse=True)
    groups = group_by_category(items, menu_service.list_categories_cached(session))
    return render_template('worker/index.html', groups=groups)

"""
JSON procedures consumed by the UI and by MenuClient.

menu.* require a signed-in principal (mutations: the admin);
cart.getMenuItemById is open.
"""
from flask import Blueprint, jsonify, request
from app.database import get_session
from app.exceptions import ValidationError
from app.middleware import require_login, require_admin
from app.services import menu_service

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _row(obj):
    return obj.to_dict() if obj is not None else None


def _body():
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


# ----------------------
# menu.*
# ----------------------

@api_bp.route('/menu', methods=['GET'])
@require_login
def menu_get_all():
    """menu.getAll"""
    return jsonify(menu_service.list_all_cached(get_session()))


@api_bp.route('/menu/search', methods=['GET'])
@require_login
def menu_get_by_name():
    """menu.getByName"""
    items = menu_service.find_by_name(get_session(), request.args.get('name', ''))
    return jsonify([item.to_dict() for item in items])


@api_bp.route('/menu', methods=['POST'])
@require_login
@require_admin
def menu_create():
    """menu.create"""
    item = menu_service.create(get_session(), _body())
    return jsonify(item.to_dict()), 201


@api_bp.route('/menu/<item_id>', methods=['PATCH'])
@require_login
@require_admin
def menu_update(item_id):
    """menu.update - null when the item does not exist."""
    return jsonify(_row(menu_service.update(get_session(), item_id, _body())))


@api_bp.route('/menu/<item_id>', methods=['DELETE'])
@require_login
@require_admin
def menu_delete(item_id):
    """menu.delete - null when the item does not exist."""
    return jsonify(_row(menu_service.delete(get_session(), item_id)))


@api_bp.route('/categories', methods=['GET'])
@require_login
def menu_get_many_categories():
    """menu.getManyCategories"""
    return jsonify(menu_service.list_categories_cached(get_session()))


@api_bp.route('/categories/<category_id>', methods=['GET'])
@require_login
def menu_get_category_by_id(category_id):
    """menu.getCategoryById"""
    return jsonify(_row(menu_service.get_category_by_id(get_session(), category_id)))


@api_bp.route('/categories', methods=['POST'])
@require_login
@require_admin
def menu_create_category():
    """menu.createCategory"""
    category = menu_service.create_category(get_session(), _body())
    return jsonify(category.to_dict()), 201


# ----------------------
# cart.*
# ----------------------

@api_bp.route('/cart/items/<item_id>', methods=['GET'])
def cart_get_menu_item_by_id(item_id):
    """cart.getMenuItemById - open to anonymous shoppers."""
    return jsonify(_row(menu_service.get_by_id(get_session(), item_id)))

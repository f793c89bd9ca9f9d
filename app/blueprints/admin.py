"""
Admin blueprint: menu management.

Create/update/delete menu items and create categories. Only the admin
principal (ADMIN_EMAIL) gets here.
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, abort, Response
from typing import Union
import logging
from app.database import get_session
from app.exceptions import ValidationError
from app.forms.menu_forms import MenuItemForm, CategoryForm
from app.middleware import require_login, require_admin
from app.services import menu_service
from app.services.menu_presentation import group_by_category

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _form_errors(form) -> str:
    return ", ".join(msg for errors in form.errors.values() for msg in errors)


@admin_bp.route('/')
@require_login
@require_admin
def index() -> Union[str, Response]:
    """Menu list grouped by category."""
    session = get_session()
    categories = menu_service.list_categories(session)
    items = menu_service.list_all(session)
    return render_template('admin/menu_list.html',
                           groups=group_by_category(items, categories),
                           categories=categories,
                           category_form=CategoryForm())


@admin_bp.route('/items/new', methods=['GET', 'POST'])
@require_login
@require_admin
def new_item() -> Union[str, Response]:
    session = get_session()
    categories = menu_service.list_categories(session)
    form = MenuItemForm()
    if request.method == 'GET' and request.args.get('category'):
        form.category.data = request.args['category']
    form.set_category_choices(categories)

    if not categories:
        flash('Create a category before adding menu items.', 'warning')

    if form.validate_on_submit():
        try:
            item = menu_service.create(session, form.to_fields())
        except ValidationError as e:
            flash(e.message, 'danger')
            return render_template('admin/item_form.html', form=form, item=None, action='new'), 400
        flash(f'Menu item "{item.name}" created', 'success')
        return redirect(url_for('admin.index'))

    if request.method == 'POST':
        flash(_form_errors(form), 'danger')
        return render_template('admin/item_form.html', form=form, item=None, action='new'), 400
    return render_template('admin/item_form.html', form=form, item=None, action='new')


@admin_bp.route('/items/<item_id>/edit', methods=['GET', 'POST'])
@require_login
@require_admin
def edit_item(item_id) -> Union[str, Response]:
    session = get_session()
    item = menu_service.get_by_id(session, item_id)
    if item is None:
        abort(404)

    form = MenuItemForm(obj=item)
    form.set_category_choices(menu_service.list_categories(session))

    if form.validate_on_submit():
        try:
            updated = menu_service.update(session, item_id, form.to_fields())
        except ValidationError as e:
            flash(e.message, 'danger')
            return render_template('admin/item_form.html', form=form, item=item, action='edit'), 400
        if updated is None:
            flash('That menu item no longer exists.', 'warning')
        else:
            flash(f'Menu item "{updated.name}" updated', 'success')
        return redirect(url_for('admin.index'))

    if request.method == 'POST':
        flash(_form_errors(form), 'danger')
        return render_template('admin/item_form.html', form=form, item=item, action='edit'), 400
    return render_template('admin/item_form.html', form=form, item=item, action='edit')


@admin_bp.route('/items/<item_id>/delete', methods=['POST'])
@require_login
@require_admin
def delete_item(item_id) -> Response:
    deleted = menu_service.delete(get_session(), item_id)
    if deleted is None:
        flash('That menu item no longer exists.', 'warning')
    else:
        flash(f'Menu item "{deleted.name}" deleted', 'success')
    return redirect(url_for('admin.index'))


@admin_bp.route('/categories/new', methods=['POST'])
@require_login
@require_admin
def new_category() -> Response:
    """Create a category, then open the item form with it selected."""
    form = CategoryForm()
    if not form.validate_on_submit():
        flash(_form_errors(form) or 'Category name is required', 'danger')
        return redirect(url_for('admin.index'))

    category = menu_service.create_category(get_session(), form.category.data)
    flash(f'Category "{category.category}" created', 'success')
    return redirect(url_for('admin.new_item', category=category.id))

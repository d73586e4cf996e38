# machinery_site/api/admin.py
# Admin JSON endpoints for catalog entries, categories and users.

import logging
from flask import abort, jsonify, request
from flask_login import current_user, login_required
from machinery_site import db
from machinery_site.api import bp
from machinery_site.api.content import invalidate_counts_cache
from machinery_site.api.payload import form_data, form_fields, json_payload, validation_error
from machinery_site.activity import log_activity
from machinery_site.catalog import CatalogStore, CategoryStore
from machinery_site.decorators import permission_required
from machinery_site.forms import CategoryForm, MachineryItemForm, UserCreateForm
from machinery_site.models import User

logger = logging.getLogger(__name__)

MACHINERY_DEFAULTS = {'featured': False, 'availability': 'available', 'hours': 0, 'price': 0}
CATEGORY_DEFAULTS = {'is_active': True, 'order': 0}


def _machinery_fields(form, payload):
    fields = form_fields(form)
    fields.pop('slug', None)
    for key in ('subcategory', 'weight'):
        fields[key] = fields[key] or None
    if fields['hours'] is None:
        fields['hours'] = 0
    if fields['price'] is None:
        fields['price'] = 0
    if 'specifications' in payload:
        specs = payload['specifications'] or {}
        if not isinstance(specs, dict):
            abort(400, description='specifications must be an object')
        fields['specifications'] = {str(k): str(v) for k, v in specs.items()}
    for key in ('images', 'tags'):
        if key in payload:
            values = payload[key] or []
            if not isinstance(values, list):
                abort(400, description=f'{key} must be a list')
            fields[key] = [str(v) for v in values]
    return fields


def _current_machinery_values(item):
    names = (
        'name', 'category', 'subcategory', 'manufacturer', 'model_number', 'year',
        'hours', 'price', 'location', 'condition', 'weight', 'featured',
        'availability', 'description',
    )
    return {name: getattr(item, name) for name in names}


def _get_item_or_404(identifier):
    item = CatalogStore().get(identifier)
    if item is None:
        abort(404, description='Machinery item not found')
    return item


# --- Machinery ---

@bp.route('/admin/machinery', methods=['GET'])
@permission_required('content.view')
def admin_list_machinery():
    items = CatalogStore().list(
        category_slug=request.args.get('category') or None,
        search=request.args.get('search', '').strip() or None,
    )
    return jsonify({'items': [item.to_dict() for item in items]})


@bp.route('/admin/machinery', methods=['POST'])
@permission_required('content.create')
def admin_create_machinery():
    payload = json_payload()
    form = MachineryItemForm(formdata=form_data({**MACHINERY_DEFAULTS, **payload}))
    if not form.validate():
        return validation_error(form)
    item = CatalogStore().create(_machinery_fields(form, payload), slug=form.slug.data or None)
    invalidate_counts_cache()
    logger.info(f"User {current_user.username} created machinery item {item.identifier}")
    log_activity('create_content', f"Created machinery item: {item.name} ({item.identifier})")
    return jsonify({'item': item.to_dict()}), 201


@bp.route('/admin/machinery/<identifier>', methods=['GET'])
@permission_required('content.view')
def admin_get_machinery(identifier):
    return jsonify({'item': _get_item_or_404(identifier).to_dict()})


@bp.route('/admin/machinery/<identifier>', methods=['PUT'])
@permission_required('content.edit')
def admin_update_machinery(identifier):
    item = _get_item_or_404(identifier)
    payload = json_payload()
    # Partial updates: validate the merged view of current values + changes
    current = _current_machinery_values(item)
    form = MachineryItemForm(formdata=form_data({**current, **payload}))
    if not form.validate():
        return validation_error(form)
    fields = _machinery_fields(form, payload)
    item = CatalogStore().update(item, fields, slug=payload.get('slug') or None)
    invalidate_counts_cache()
    logger.info(f"User {current_user.username} updated machinery item {item.identifier}")
    log_activity('update_content', f"Updated machinery item: {item.name} ({item.identifier})")
    return jsonify({'item': item.to_dict()})


@bp.route('/admin/machinery/<identifier>', methods=['DELETE'])
@permission_required('content.delete')
def admin_delete_machinery(identifier):
    item = _get_item_or_404(identifier)
    CatalogStore().delete(item)
    invalidate_counts_cache()
    logger.info(f"User {current_user.username} deleted machinery item {identifier}")
    log_activity('delete_content', f"Deleted machinery item: {identifier}")
    return jsonify({'message': 'Machinery item deleted successfully', 'id': identifier})


# --- Categories ---

@bp.route('/admin/categories', methods=['GET'])
@permission_required('content.view')
def admin_list_categories():
    return jsonify({'categories': [c.to_dict() for c in CategoryStore().list()]})


@bp.route('/admin/categories', methods=['POST'])
@permission_required('content.create')
def admin_create_category():
    payload = json_payload()
    form = CategoryForm(formdata=form_data({**CATEGORY_DEFAULTS, **payload}))
    if not form.validate():
        return validation_error(form)
    category = CategoryStore().create(form_fields(form))
    log_activity('create_content', f"Created category: {category.slug}")
    return jsonify({'category': category.to_dict()}), 201


@bp.route('/admin/categories/<int:category_id>', methods=['PUT'])
@permission_required('content.edit')
def admin_update_category(category_id):
    store = CategoryStore()
    category = store.get(category_id)
    if category is None:
        abort(404, description='Category not found')
    payload = json_payload()
    current = {
        'name': category.name,
        'description': category.description,
        'image': category.image,
        'parent_id': category.parent_id,
        'order': category.order,
        'is_active': category.is_active,
    }
    form = CategoryForm(formdata=form_data({**current, **payload}))
    if not form.validate():
        return validation_error(form)
    category = store.update(category, form_fields(form))
    log_activity('update_content', f"Updated category: {category.slug}")
    return jsonify({'category': category.to_dict()})


@bp.route('/admin/categories/<int:category_id>', methods=['DELETE'])
@permission_required('content.delete')
def admin_delete_category(category_id):
    store = CategoryStore()
    category = store.get(category_id)
    if category is None:
        abort(404, description='Category not found')
    slug = category.slug
    store.delete(category)
    log_activity('delete_content', f"Deleted category: {slug}")
    return jsonify({'message': 'Category deleted successfully', 'id': category_id})


# --- Users ---

@bp.route('/admin/users', methods=['GET'])
@permission_required('users.view')
def admin_list_users():
    users = db.session.scalars(db.select(User).order_by(User.username)).all()
    return jsonify({'users': [u.to_dict() for u in users]})


@bp.route('/admin/users', methods=['POST'])
@permission_required('users.create')
def admin_create_user():
    payload = json_payload()
    form = UserCreateForm(formdata=form_data(payload))
    if not form.validate():
        return validation_error(form)
    user = User(username=form.username.data, email=form.email.data, role=form.role.data)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    logger.info(f"User {current_user.username} created user {user.username} ({user.role})")
    log_activity('create_user', f"Created user: {user.username} ({user.role})")
    return jsonify({'user': user.to_dict()}), 201


@bp.route('/auth/me')
@login_required
def me():
    data = current_user.to_dict()
    data['permissions'] = current_user.permissions
    return jsonify({'user': data})

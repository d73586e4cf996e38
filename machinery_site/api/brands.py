# machinery_site/api/brands.py
# Brand logos: public list of active brands plus admin management.

import logging
from flask import abort, jsonify, request
from machinery_site.activity import log_activity
from machinery_site.api import bp
from machinery_site.api.payload import form_data, form_fields, json_payload, validation_error
from machinery_site.content import BrandStore
from machinery_site.decorators import permission_required
from machinery_site.forms import BrandForm

logger = logging.getLogger(__name__)


def _get_brand_or_404(brand_id):
    brand = BrandStore().get(brand_id)
    if brand is None:
        abort(404, description='Brand not found')
    return brand


@bp.route('/brands')
def list_brands():
    brands = BrandStore().list(active_only=True)
    logger.debug(f"Public brands request returned {len(brands)} brands")
    return jsonify({'brands': [b.to_dict() for b in brands]})


@bp.route('/admin/brands', methods=['GET'])
@permission_required('content.view')
def admin_list_brands():
    active_only = request.args.get('activeOnly', '').lower() == 'true'
    return jsonify({'brands': [b.to_dict() for b in BrandStore().list(active_only=active_only)]})


@bp.route('/admin/brands', methods=['POST'])
@permission_required('content.create')
def admin_create_brand():
    payload = json_payload()
    form = BrandForm(formdata=form_data({'is_active': True, **payload}))
    if not form.validate():
        return validation_error(form)
    brand = BrandStore().create(form_fields(form))
    log_activity('create_content', f"Created brand: {brand.name}")
    return jsonify({'brand': brand.to_dict()}), 201


@bp.route('/admin/brands/<int:brand_id>', methods=['GET'])
@permission_required('content.view')
def admin_get_brand(brand_id):
    return jsonify({'brand': _get_brand_or_404(brand_id).to_dict()})


@bp.route('/admin/brands/<int:brand_id>', methods=['PUT'])
@permission_required('content.edit')
def admin_update_brand(brand_id):
    brand = _get_brand_or_404(brand_id)
    payload = json_payload()
    current = {'name': brand.name, 'logo': brand.logo, 'order': brand.order, 'is_active': brand.is_active}
    form = BrandForm(formdata=form_data({**current, **payload}))
    if not form.validate():
        return validation_error(form)
    brand = BrandStore().update(brand, form_fields(form))
    log_activity('update_content', f"Updated brand: {brand.name}")
    return jsonify({'brand': brand.to_dict()})


@bp.route('/admin/brands/reorder', methods=['PUT'])
@permission_required('content.edit')
def admin_reorder_brands():
    brand_ids = json_payload().get('brandIds')
    if not isinstance(brand_ids, list) or not all(isinstance(i, int) for i in brand_ids):
        abort(400, description='brandIds must be a list of brand ids')
    try:
        brands = BrandStore().reorder(brand_ids)
    except ValueError as e:
        abort(400, description=str(e))
    log_activity('update_content', f"Reordered brands: {brand_ids}")
    return jsonify({'brands': [b.to_dict() for b in brands]})


@bp.route('/admin/brands/<int:brand_id>', methods=['DELETE'])
@permission_required('content.delete')
def admin_delete_brand(brand_id):
    brand = _get_brand_or_404(brand_id)
    name = brand.name
    BrandStore().delete(brand)
    log_activity('delete_content', f"Deleted brand: {name}")
    return jsonify({'message': 'Brand deleted successfully', 'id': brand_id})

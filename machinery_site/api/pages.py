# machinery_site/api/pages.py
# Page-builder content: published pages for the public site, and the admin
# endpoints that edit them. Titles and descriptions carry en/ja text.

import logging
from flask import abort, jsonify
from flask_login import current_user
from machinery_site.activity import log_activity
from machinery_site.api import bp
from machinery_site.api.payload import form_data, form_fields, json_payload, validation_error
from machinery_site.content import PageStore
from machinery_site.decorators import permission_required
from machinery_site.forms import PageContentForm
from machinery_site.permissions import has_permission

logger = logging.getLogger(__name__)

LOCALIZED_PAGE_FIELDS = ('title', 'description')


def _page_payload():
    """Spreads {'title': {'en', 'ja'}} style values into title_en/title_ja keys."""
    payload = json_payload()
    for field in LOCALIZED_PAGE_FIELDS:
        value = payload.pop(field, None)
        if value is None:
            continue
        if not isinstance(value, dict):
            abort(400, description=f'{field} must be an object with en and ja text')
        for lang in ('en', 'ja'):
            if lang in value:
                payload[f'{field}_{lang}'] = value[lang]
    return payload


def _page_fields(form):
    fields = form_fields(form)
    fields.pop('slug', None)
    for key in ('description_en', 'description_ja'):
        fields[key] = fields[key] or None
    return fields


def _check_publish_permission(was_published, is_published):
    if was_published != is_published and not has_permission(current_user.role, 'content.publish'):
        abort(403, description='Publishing requires the content.publish permission')


def _get_page_or_404(page_id):
    page = PageStore().get(page_id)
    if page is None:
        abort(404, description='Page not found')
    return page


@bp.route('/content/pages')
def list_pages():
    pages = PageStore().list(published_only=True)
    return jsonify({'pages': [{'slug': p.slug, 'title': p.to_dict()['title']} for p in pages]})


@bp.route('/content/pages/<slug>')
def page_detail(slug):
    page = PageStore().find_by_slug(slug, published_only=True)
    if page is None:
        logger.debug(f"No published page at {slug}")
        abort(404, description='Page not found')
    return jsonify({'page': page.to_dict()})


@bp.route('/admin/content', methods=['GET'])
@permission_required('content.view')
def admin_list_pages():
    return jsonify({'pages': [p.to_dict() for p in PageStore().list()]})


@bp.route('/admin/content', methods=['POST'])
@permission_required('content.create')
def admin_create_page():
    payload = _page_payload()
    form = PageContentForm(formdata=form_data(payload))
    if not form.validate():
        return validation_error(form)
    _check_publish_permission(False, form.is_published.data)
    page = PageStore().create(_page_fields(form), slug=form.slug.data or None, blocks=payload.get('blocks'))
    log_activity('create_content', f"Created page: {page.slug}")
    if page.is_published:
        log_activity('publish_content', f"Published page: {page.slug}")
    return jsonify({'page': page.to_dict()}), 201


@bp.route('/admin/content/<int:page_id>', methods=['GET'])
@permission_required('content.view')
def admin_get_page(page_id):
    return jsonify({'page': _get_page_or_404(page_id).to_dict()})


@bp.route('/admin/content/<int:page_id>', methods=['PUT'])
@permission_required('content.edit')
def admin_update_page(page_id):
    page = _get_page_or_404(page_id)
    payload = _page_payload()
    current = {
        'title_en': page.title_en,
        'title_ja': page.title_ja,
        'description_en': page.description_en,
        'description_ja': page.description_ja,
        'is_published': page.is_published,
    }
    form = PageContentForm(formdata=form_data({**current, **payload}))
    if not form.validate():
        return validation_error(form)
    was_published = page.is_published
    _check_publish_permission(was_published, form.is_published.data)
    page = PageStore().update(page, _page_fields(form), slug=payload.get('slug') or None,
                              blocks=payload.get('blocks'))
    log_activity('update_content', f"Updated page: {page.slug}")
    if page.is_published != was_published:
        if page.is_published:
            log_activity('publish_content', f"Published page: {page.slug}")
        else:
            log_activity('unpublish_content', f"Unpublished page: {page.slug}")
    return jsonify({'page': page.to_dict()})


@bp.route('/admin/content/<int:page_id>', methods=['DELETE'])
@permission_required('content.delete')
def admin_delete_page(page_id):
    page = _get_page_or_404(page_id)
    slug = page.slug
    PageStore().delete(page)
    log_activity('delete_content', f"Deleted page: {slug}")
    return jsonify({'message': 'Page deleted successfully', 'id': page_id})

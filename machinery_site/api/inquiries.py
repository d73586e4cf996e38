# machinery_site/api/inquiries.py
# Public sell/buy inquiry form and the admin list of submissions.

import logging
from cachetools import TTLCache
from flask import abort, current_app, jsonify, request
from machinery_site.api import bp
from machinery_site.api.payload import form_data, form_fields, json_payload, validation_error
from machinery_site.content import InquiryStore
from machinery_site.decorators import permission_required
from machinery_site.forms import INQUIRY_TYPES, SellBuyInquiryForm

logger = logging.getLogger(__name__)

RATE_LIMIT_CACHE_KEY = 'inquiry_rate_limit_cache'
RATE_LIMIT_WINDOW = 60


def _client_ip():
    forwarded = request.headers.get('X-Forwarded-For', '')
    return forwarded.split(',')[0].strip() or request.remote_addr or 'unknown'


def _rate_limited(ip_address):
    """True once an address has sent more than INQUIRY_RATE_LIMIT forms in a minute."""
    limit = current_app.config.get('INQUIRY_RATE_LIMIT', 0)
    if limit <= 0:
        return False
    cache = current_app.extensions.get(RATE_LIMIT_CACHE_KEY)
    if cache is None:
        cache = current_app.extensions[RATE_LIMIT_CACHE_KEY] = TTLCache(maxsize=10000, ttl=RATE_LIMIT_WINDOW)
    # A mutable counter keeps the entry's expiry tied to the first request
    hits = cache.get(ip_address)
    if hits is None:
        hits = cache[ip_address] = [0]
    hits[0] += 1
    return hits[0] > limit


@bp.route('/sell-buy-form', methods=['POST'])
def submit_inquiry():
    ip_address = _client_ip()
    if _rate_limited(ip_address):
        logger.warning(f"Inquiry rate limit exceeded for {ip_address}")
        abort(429, description='Too many requests. Please try again later.')
    form = SellBuyInquiryForm(formdata=form_data(json_payload()))
    if not form.validate():
        return validation_error(form)
    fields = {key: value or None for key, value in form_fields(form).items()}
    inquiry = InquiryStore().create(fields, ip_address=ip_address)
    return jsonify({'success': True, 'id': inquiry.id}), 201


@bp.route('/admin/inquiries', methods=['GET'])
@permission_required('content.view')
def admin_list_inquiries():
    form_type = request.args.get('type') or None
    if form_type is not None and form_type not in INQUIRY_TYPES:
        abort(400, description=f"type must be one of {', '.join(INQUIRY_TYPES)}")
    inquiries = InquiryStore().list(form_type=form_type)
    return jsonify({'inquiries': [i.to_dict() for i in inquiries]})

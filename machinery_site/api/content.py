# machinery_site/api/content.py
# Public, read-only catalog endpoints.

import logging
from cachetools import TTLCache
from flask import abort, current_app, jsonify, request
from machinery_site.api import bp
from machinery_site.catalog import CatalogStore, CategoryStore

logger = logging.getLogger(__name__)

COUNTS_CACHE_KEY = 'category_counts_cache'


def _counts_cache():
    ttl = current_app.config.get('CATEGORY_COUNTS_CACHE_TTL', 0)
    if ttl <= 0:
        return None
    cache = current_app.extensions.get(COUNTS_CACHE_KEY)
    if cache is None:
        cache = current_app.extensions[COUNTS_CACHE_KEY] = TTLCache(maxsize=1, ttl=ttl)
    return cache


def invalidate_counts_cache():
    cache = current_app.extensions.get(COUNTS_CACHE_KEY)
    if cache is not None:
        cache.clear()


def _request_language():
    lang = request.args.get('lang')
    return lang if lang in current_app.config['SUPPORTED_LANGUAGES'] else None


def _parse_bool(value):
    if value is None:
        return None
    return value.lower() in ('1', 'true', 'yes')


@bp.route('/content/machinery')
def list_machinery():
    items = CatalogStore().list(
        category_slug=request.args.get('category') or None,
        featured=_parse_bool(request.args.get('featured')),
        search=request.args.get('search', '').strip() or None,
        limit=request.args.get('limit', type=int),
    )
    lang = _request_language()
    return jsonify({'items': [item.to_dict(lang) for item in items], 'total': len(items)})


@bp.route('/content/machinery/counts')
def machinery_counts():
    cache = _counts_cache()
    if cache is not None and 'counts' in cache:
        counts = cache['counts']
    else:
        counts = CatalogStore().category_counts()
        if cache is not None:
            cache['counts'] = counts
    return jsonify({'counts': counts, 'total': sum(counts.values())})


@bp.route('/content/machinery/<category_slug>/<slug>')
def machinery_detail(category_slug, slug):
    item = CatalogStore().find_by_path(category_slug, slug)
    if item is None:
        logger.debug(f"No machinery item at {category_slug}/{slug}")
        abort(404, description='Machinery item not found')
    return jsonify({'item': item.to_dict(_request_language())})


@bp.route('/content/categories')
def list_categories():
    categories = CategoryStore().list(active_only=True)
    return jsonify({'categories': [c.to_dict() for c in categories]})

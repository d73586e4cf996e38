# machinery_site/core/routes.py

import logging
from flask import abort, current_app, redirect, render_template, request, url_for
from machinery_site.catalog import CatalogStore, CategoryStore, resolve_canonical_path
from machinery_site.core import bp

logger = logging.getLogger(__name__)


def _require_language(lang):
    if lang not in current_app.config['SUPPORTED_LANGUAGES']:
        abort(404)


@bp.route('/')
def index():
    return redirect(url_for('core.home', lang=current_app.config['DEFAULT_LANGUAGE']))


@bp.route('/<lang>')
def home(lang):
    _require_language(lang)
    featured = CatalogStore().list(featured=True, limit=6)
    categories = CategoryStore().list(active_only=True)
    return render_template('home.html', lang=lang, featured=featured, categories=categories)


@bp.route('/<lang>/catalog')
def catalog(lang):
    _require_language(lang)
    search = request.args.get('search', '').strip() or None
    items = CatalogStore().list(category_slug=request.args.get('category') or None, search=search)
    categories = CategoryStore().list(active_only=True)
    return render_template('catalog/list.html', lang=lang, items=items,
                           categories=categories, category=None, search=search)


@bp.route('/<lang>/catalog/<category_slug>')
def catalog_category(lang, category_slug):
    _require_language(lang)
    items = CatalogStore().list(category_slug=category_slug)
    categories = CategoryStore().list(active_only=True)
    category = CategoryStore().find_by_slug(category_slug)
    return render_template('catalog/list.html', lang=lang, items=items,
                           categories=categories, category=category, search=None)


@bp.route('/<lang>/catalog/detail/<identifier>')
def legacy_detail(lang, identifier):
    """Old id-based detail links; slugs can still change, so the redirect is temporary."""
    _require_language(lang)
    path = resolve_canonical_path(identifier, lang, CatalogStore())
    return redirect(path, code=302)


@bp.route('/<lang>/catalog/<category_slug>/<slug>')
def catalog_detail(lang, category_slug, slug):
    _require_language(lang)
    store = CatalogStore()
    item = store.find_by_path(category_slug, slug)
    if item is None:
        abort(404)
    similar = [i for i in store.list(category_slug=category_slug, limit=5) if i.id != item.id][:4]
    return render_template('catalog/detail.html', lang=lang, item=item, similar=similar)

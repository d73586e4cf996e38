# machinery_site/api/__init__.py
# JSON API blueprint: public content endpoints and the session-authenticated
# admin endpoints share the /api prefix and the JSON error handlers below.

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException
from machinery_site.exceptions import DuplicateSlug, InvalidContentBlock, ReservedSlug

bp = Blueprint('api', __name__)


@bp.errorhandler(DuplicateSlug)
def handle_duplicate_slug(error):
    return jsonify({'error': error.message, 'slug': error.slug}), 409


@bp.errorhandler(ReservedSlug)
def handle_reserved_slug(error):
    return jsonify({'error': error.message, 'slug': error.slug}), 400


@bp.errorhandler(InvalidContentBlock)
def handle_invalid_block(error):
    return jsonify({'error': error.message}), 400


@bp.errorhandler(HTTPException)
def handle_http_error(error):
    return jsonify({'error': error.description}), error.code


from machinery_site.api import content, admin, brands, pages, activity, inquiries  # noqa: F401 E402

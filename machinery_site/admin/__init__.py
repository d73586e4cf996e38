# machinery_site/admin/__init__.py
# Server-rendered admin pages. Content editing itself goes through /api/admin.

from flask import Blueprint

bp = Blueprint('admin', __name__)

from machinery_site.admin import routes # noqa: F401 E402

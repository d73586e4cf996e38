# machinery_site/core/__init__.py
# Public, server-rendered site: home page, catalog listing and detail pages,
# and the legacy detail URL redirect.

from flask import Blueprint

bp = Blueprint('core', __name__)

from machinery_site.core import routes # noqa: F401 E402

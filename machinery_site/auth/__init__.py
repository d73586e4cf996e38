# machinery_site/auth/__init__.py
from flask import Blueprint

# Define the auth blueprint
bp = Blueprint('auth', __name__)

# Import routes at the bottom
from machinery_site.auth import routes # noqa: F401 E402

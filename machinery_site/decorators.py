# machinery_site/decorators.py
from functools import wraps
from flask_login import current_user
from flask import abort
from machinery_site import login_manager
from machinery_site.permissions import has_permission

def permission_required(key):
    """
    Decorator to ensure the user is logged in and their role grants `key`.
    Anonymous users go through the login manager (redirect or 401);
    logged-in users without the permission get 403 Forbidden.
    """
    def decorator(func):
        @wraps(func)
        def decorated_view(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if not has_permission(current_user.role, key):
                abort(403)
            return func(*args, **kwargs)
        return decorated_view
    return decorator

# machinery_site/admin/routes.py
from flask import render_template
from flask_login import current_user
from machinery_site import db
from machinery_site.admin import bp
from machinery_site.catalog import CatalogStore, CategoryStore
from machinery_site.decorators import permission_required
from machinery_site.models import User


@bp.route('/')
@permission_required('dashboard.view')
def dashboard():
    """Landing page for staff: headline counts and the newest listings."""
    store = CatalogStore()
    counts = store.category_counts()
    stats = {
        'machinery': sum(counts.values()),
        'categories': len(CategoryStore().list()),
        'users': db.session.scalar(db.select(db.func.count(User.id))),
    }
    return render_template(
        'admin/dashboard.html',
        title='Dashboard',
        stats=stats,
        counts=counts,
        recent=store.list(limit=5),
        permissions=current_user.permissions,
    )

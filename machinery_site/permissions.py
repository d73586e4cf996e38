# machinery_site/permissions.py
# Permission catalog and role-name checks for the admin backend.

from collections import OrderedDict

# key -> (display name, category)
PERMISSIONS = OrderedDict([
    ('dashboard.view', ('View Dashboard', 'Dashboard')),
    ('dashboard.analytics', ('View Analytics', 'Dashboard')),

    ('users.view', ('View Users', 'User Management')),
    ('users.create', ('Create Users', 'User Management')),
    ('users.edit', ('Edit Users', 'User Management')),
    ('users.delete', ('Delete Users', 'User Management')),
    ('users.activate', ('Activate/Deactivate Users', 'User Management')),

    ('content.view', ('View Content', 'Content Management')),
    ('content.create', ('Create Content', 'Content Management')),
    ('content.edit', ('Edit Content', 'Content Management')),
    ('content.delete', ('Delete Content', 'Content Management')),
    ('content.publish', ('Publish Content', 'Content Management')),

    ('settings.view', ('View Settings', 'Settings')),
    ('settings.edit', ('Edit Settings', 'Settings')),

    ('activity.view', ('View Activity Logs', 'Activity Logs')),
    ('activity.export', ('Export Activity Logs', 'Activity Logs')),
])

DEFAULT_ROLE_PERMISSIONS = {
    'admin': frozenset(PERMISSIONS),
    'editor': frozenset([
        'dashboard.view',
        'content.view',
        'content.create',
        'content.edit',
        'content.publish',
    ]),
    'viewer': frozenset([
        'dashboard.view',
        'content.view',
    ]),
}

ROLE_NAMES = tuple(DEFAULT_ROLE_PERMISSIONS)


def permissions_for_role(role):
    """Returns the permission keys granted to a role name; unknown roles get none."""
    return DEFAULT_ROLE_PERMISSIONS.get(role, frozenset())


def has_permission(role, key):
    return key in permissions_for_role(role)


def permission_categories():
    categories = []
    for _, category in PERMISSIONS.values():
        if category not in categories:
            categories.append(category)
    return categories


def permissions_by_category(category):
    return [key for key, (_, cat) in PERMISSIONS.items() if cat == category]

# tests/test_permissions.py

from machinery_site.permissions import (
    PERMISSIONS,
    has_permission,
    permission_categories,
    permissions_by_category,
    permissions_for_role,
)


def test_admin_has_every_permission():
    assert permissions_for_role('admin') == frozenset(PERMISSIONS)


def test_editor_permissions():
    assert has_permission('editor', 'content.create')
    assert has_permission('editor', 'content.publish')
    assert not has_permission('editor', 'content.delete')
    assert not has_permission('editor', 'users.view')


def test_viewer_permissions():
    assert has_permission('viewer', 'content.view')
    assert not has_permission('viewer', 'content.edit')


def test_unknown_role_has_nothing():
    assert permissions_for_role('superuser') == frozenset()
    assert not has_permission(None, 'dashboard.view')


def test_categories():
    assert permission_categories()[0] == 'Dashboard'
    assert permissions_by_category('Settings') == ['settings.view', 'settings.edit']

# tests/test_admin_api.py

from tests.helpers import create_machinery

NEW_ITEM = {
    'name': 'Komatsu PC200-8 Excavator',
    'category': 'Excavators',
    'manufacturer': 'Komatsu',
    'modelNumber': 'PC200-8',
    'year': 2015,
    'hours': 6400,
    'price': 58000,
    'location': 'Yokohama, Japan',
    'condition': 'Used - Good',
    'featured': True,
    'description': 'Well maintained 20 ton class excavator.',
    'specifications': {'Operating weight': '19,900 kg'},
    'images': ['https://images.example.com/pc200.jpg'],
}


# --- Access control ---

def test_anonymous_gets_401(client):
    response = client.get('/api/admin/machinery')
    assert response.status_code == 401
    assert response.get_json()['error'] == 'Authentication required'


def test_viewer_can_read_but_not_write(viewer_client):
    assert viewer_client.get('/api/admin/machinery').status_code == 200
    response = viewer_client.post('/api/admin/machinery', json=NEW_ITEM)
    assert response.status_code == 403
    assert 'error' in response.get_json()


def test_editor_cannot_delete(editor_client, app):
    with app.app_context():
        identifier = create_machinery()
    assert editor_client.delete(f'/api/admin/machinery/{identifier}').status_code == 403


# --- Machinery CRUD ---

def test_create_machinery(editor_client):
    response = editor_client.post('/api/admin/machinery', json=NEW_ITEM)
    assert response.status_code == 201
    item = response.get_json()['item']
    assert item['slug'] == 'komatsu-pc200-8-excavator'
    assert item['categorySlug'] == 'excavators'
    assert item['modelNumber'] == 'PC200-8'
    assert item['priceFormatted'] == '$58,000'
    assert item['featured'] is True
    assert item['specifications'] == {'Operating weight': '19,900 kg'}
    assert len(item['id']) == 24


def test_create_machinery_validation_error(editor_client):
    response = editor_client.post('/api/admin/machinery', json={'name': 'Incomplete'})
    assert response.status_code == 400
    body = response.get_json()
    assert body['error'] == 'Validation failed'
    assert 'manufacturer' in body['details']
    assert 'year' in body['details']


def test_create_machinery_rejects_non_object(editor_client):
    response = editor_client.post('/api/admin/machinery', json=['not', 'an', 'object'])
    assert response.status_code == 400


def test_create_duplicate_slug_conflict(editor_client):
    assert editor_client.post('/api/admin/machinery', json=NEW_ITEM).status_code == 201
    response = editor_client.post('/api/admin/machinery', json=NEW_ITEM)
    assert response.status_code == 409
    assert response.get_json()['slug'] == 'komatsu-pc200-8-excavator'


def test_get_machinery(viewer_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = viewer_client.get(f'/api/admin/machinery/{identifier}')
    assert response.status_code == 200
    assert response.get_json()['item']['slug'] == 'lathe-200'
    assert viewer_client.get('/api/admin/machinery/' + '0' * 24).status_code == 404


def test_partial_update_renames_slug(editor_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = editor_client.put(f'/api/admin/machinery/{identifier}', json={'name': 'Lathe 250 Turbo'})
    assert response.status_code == 200
    item = response.get_json()['item']
    assert item['slug'] == 'lathe-250-turbo'
    assert item['manufacturer'] == 'Okuma'
    assert item['id'] == identifier


def test_update_keeps_slug_when_name_unchanged(editor_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = editor_client.put(f'/api/admin/machinery/{identifier}', json={'hours': 15000, 'featured': False})
    assert response.status_code == 200
    item = response.get_json()['item']
    assert item['slug'] == 'lathe-200'
    assert item['hours'] == 15000


def test_update_with_slug_override(editor_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = editor_client.put(f'/api/admin/machinery/{identifier}', json={'slug': 'Spring Sale Lathe'})
    assert response.status_code == 200
    assert response.get_json()['item']['slug'] == 'spring-sale-lathe'


def test_update_identifier_is_immutable(editor_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = editor_client.put(f'/api/admin/machinery/{identifier}', json={'identifier': 'f' * 24})
    assert response.status_code == 200
    assert response.get_json()['item']['id'] == identifier


def test_delete_machinery(admin_client, app):
    with app.app_context():
        identifier = create_machinery()
    response = admin_client.delete(f'/api/admin/machinery/{identifier}')
    assert response.status_code == 200
    assert response.get_json()['id'] == identifier
    assert admin_client.get(f'/api/admin/machinery/{identifier}').status_code == 404


def test_legacy_redirect_follows_rename(editor_client, client, app):
    with app.app_context():
        identifier = create_machinery()
    editor_client.put(f'/api/admin/machinery/{identifier}', json={'name': 'Lathe 300', 'category': 'Lathes'})
    response = client.get(f'/en/catalog/detail/{identifier}')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/en/catalog/lathes/lathe-300')


# --- Categories ---

def test_category_crud(admin_client):
    response = admin_client.post('/api/admin/categories', json={'name': 'Wheel Loaders', 'order': 3})
    assert response.status_code == 201
    category = response.get_json()['category']
    assert category['slug'] == 'wheel-loaders'
    assert category['isActive'] is True

    response = admin_client.put(f"/api/admin/categories/{category['id']}", json={'name': 'Loaders'})
    assert response.status_code == 200
    assert response.get_json()['category']['slug'] == 'loaders'
    assert response.get_json()['category']['order'] == 3

    response = admin_client.delete(f"/api/admin/categories/{category['id']}")
    assert response.status_code == 200
    assert admin_client.put(f"/api/admin/categories/{category['id']}", json={'name': 'x'}).status_code == 404


def test_duplicate_category(admin_client):
    admin_client.post('/api/admin/categories', json={'name': 'Cranes'})
    response = admin_client.post('/api/admin/categories', json={'name': 'Cranes'})
    assert response.status_code == 409


def test_category_slug_detail_is_reserved(admin_client):
    response = admin_client.post('/api/admin/categories', json={'name': 'Detail'})
    assert response.status_code == 400
    assert response.get_json()['slug'] == 'detail'

    category = admin_client.post('/api/admin/categories', json={'name': 'Cranes'}).get_json()['category']
    response = admin_client.put(f"/api/admin/categories/{category['id']}", json={'name': 'Detail'})
    assert response.status_code == 400
    names = [c['name'] for c in admin_client.get('/api/admin/categories').get_json()['categories']]
    assert names == ['Cranes']


# --- Users ---

def test_admin_creates_user(admin_client):
    response = admin_client.post('/api/admin/users', json={
        'username': 'new_editor',
        'email': 'new_editor@example.com',
        'password': 'longenough',
        'role': 'editor',
    })
    assert response.status_code == 201
    assert response.get_json()['user']['role'] == 'editor'

    usernames = [u['username'] for u in admin_client.get('/api/admin/users').get_json()['users']]
    assert 'new_editor' in usernames


def test_create_user_rejects_unknown_role(admin_client):
    response = admin_client.post('/api/admin/users', json={
        'username': 'someone',
        'email': 'someone@example.com',
        'password': 'longenough',
        'role': 'superuser',
    })
    assert response.status_code == 400
    assert 'role' in response.get_json()['details']


def test_editor_cannot_manage_users(editor_client):
    assert editor_client.get('/api/admin/users').status_code == 403


def test_me(editor_client):
    response = editor_client.get('/api/auth/me')
    assert response.status_code == 200
    user = response.get_json()['user']
    assert user['role'] == 'editor'
    assert 'content.edit' in user['permissions']
    assert 'users.view' not in user['permissions']

# tests/test_core.py

from urllib.parse import urlparse
from machinery_site import db
from machinery_site.models import MachineryItem
from tests.helpers import create_machinery, machinery_fields


def test_app_exists(app):
    assert app is not None


def test_root_redirects_to_default_language(client):
    response = client.get('/')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/en'


def test_home_page(client, app):
    with app.app_context():
        create_machinery(featured=True)
    response = client.get('/en')
    assert response.status_code == 200
    assert bytes(app.config['SITE_NAME'], 'utf-8') in response.data
    assert b"Lathe 200" in response.data


def test_unsupported_language_is_404(client):
    assert client.get('/fr').status_code == 404
    assert client.get('/fr/catalog').status_code == 404


def test_catalog_listing(client, app):
    with app.app_context():
        create_machinery()
        create_machinery(name='Komatsu PC200', category='Excavators')
    response = client.get('/ja/catalog')
    assert response.status_code == 200
    assert b"Lathe 200" in response.data
    assert b"Komatsu PC200" in response.data

    response = client.get('/ja/catalog/excavators')
    assert response.status_code == 200
    assert b"Komatsu PC200" in response.data
    assert b"Lathe 200" not in response.data


def test_detail_page(client, app):
    with app.app_context():
        create_machinery()
    response = client.get('/en/catalog/metalworking/lathe-200')
    assert response.status_code == 200
    assert b"Lathe 200" in response.data
    assert "¥1,375,000".encode('utf-8') in response.data


def test_detail_page_missing(client):
    assert client.get('/en/catalog/metalworking/nope').status_code == 404


def test_legacy_url_redirects_to_canonical_path(client, app):
    with app.app_context():
        identifier = create_machinery()
    response = client.get(f'/en/catalog/detail/{identifier}')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/en/catalog/metalworking/lathe-200'


def test_legacy_url_for_unmigrated_record(client, app):
    with app.app_context():
        item = MachineryItem(**machinery_fields(category=None), slug='', category_slug='')
        db.session.add(item)
        db.session.commit()
        identifier = item.identifier
    response = client.get(f'/en/catalog/detail/{identifier}')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == f'/en/catalog/machinery/{identifier}'


def test_legacy_url_malformed_identifier(client):
    response = client.get('/ja/catalog/detail/not-a-real-id')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/ja/catalog'


def test_legacy_url_unknown_identifier(client):
    response = client.get('/en/catalog/detail/' + 'a' * 24)
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/en/catalog'


def test_legacy_url_accepts_uppercase_identifier(client, app):
    with app.app_context():
        identifier = create_machinery()
    response = client.get(f'/en/catalog/detail/{identifier.upper()}')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == '/en/catalog/metalworking/lathe-200'


def test_legacy_url_uppercase_identifier_for_unmigrated_record(client, app):
    with app.app_context():
        item = MachineryItem(**machinery_fields(category=None), slug='', category_slug='')
        db.session.add(item)
        db.session.commit()
        identifier = item.identifier
    response = client.get(f'/en/catalog/detail/{identifier.upper()}')
    assert response.status_code == 302
    assert urlparse(response.headers['Location']).path == f'/en/catalog/machinery/{identifier}'

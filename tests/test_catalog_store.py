# tests/test_catalog_store.py

import pytest
from machinery_site import db
from machinery_site.catalog import CatalogStore, CategoryStore
from machinery_site.cli import BackfillResult, backfill_slugs
from machinery_site.exceptions import DuplicateSlug, ReservedSlug
from machinery_site.models import Category, MachineryItem
from tests.helpers import create_machinery, machinery_fields


def test_create_derives_slugs_and_prices(app):
    with app.app_context():
        item = CatalogStore().create(machinery_fields())
        assert len(item.identifier) == 24
        assert item.slug == 'lathe-200'
        assert item.category_slug == 'metalworking'
        assert item.price_formatted == '$12,500'
        assert item.price_jpy == '¥1,375,000'


def test_create_with_explicit_slug(app):
    with app.app_context():
        item = CatalogStore().create(machinery_fields(), slug='Custom Lathe Slug')
        assert item.slug == 'custom-lathe-slug'


def test_missing_category_uses_fallback_token(app):
    with app.app_context():
        item = CatalogStore().create(machinery_fields(category=None))
        assert item.category_slug == 'machinery'


def test_update_name_recomputes_slug(app):
    with app.app_context():
        store = CatalogStore()
        item = store.create(machinery_fields())
        store.update(item, {'name': 'Lathe 300 Deluxe'})
        assert item.slug == 'lathe-300-deluxe'


def test_update_other_fields_keeps_slug(app):
    with app.app_context():
        store = CatalogStore()
        item = store.create(machinery_fields(), slug='kept-slug')
        store.update(item, {'hours': 13000, 'name': 'Lathe 200'})
        assert item.slug == 'kept-slug'
        assert item.hours == 13000


def test_update_with_slug_override_wins(app):
    with app.app_context():
        store = CatalogStore()
        item = store.create(machinery_fields())
        store.update(item, {'name': 'Renamed Lathe'}, slug='special-offer')
        assert item.slug == 'special-offer'


def test_update_category_recomputes_category_slug(app):
    with app.app_context():
        store = CatalogStore()
        item = store.create(machinery_fields())
        store.update(item, {'category': 'Machine Tools', 'price': 20000})
        assert item.category_slug == 'machine-tools'
        assert item.price_formatted == '$20,000'


def test_duplicate_slug_rejected(app):
    with app.app_context():
        store = CatalogStore()
        store.create(machinery_fields())
        with pytest.raises(DuplicateSlug) as excinfo:
            store.create(machinery_fields(category='Lathes'))
        assert excinfo.value.slug == 'lathe-200'
        # Session is usable again after the rollback
        assert len(store.list()) == 1


def test_find_by_id_projects_slug_fields(app):
    with app.app_context():
        identifier = create_machinery()
        assert CatalogStore().find_by_id(identifier) == {
            'slug': 'lathe-200',
            'category_slug': 'metalworking',
        }
        assert CatalogStore().find_by_id('0' * 24) is None


def test_list_filters_and_counts(app):
    with app.app_context():
        create_machinery()
        create_machinery(name='Komatsu PC200', category='Excavators', manufacturer='Komatsu', featured=True)
        store = CatalogStore()
        assert [i.slug for i in store.list(category_slug='excavators')] == ['komatsu-pc200']
        assert [i.slug for i in store.list(featured=True)] == ['komatsu-pc200']
        assert [i.slug for i in store.list(search='okuma')] == ['lathe-200']
        assert store.category_counts() == {'metalworking': 1, 'excavators': 1}


def test_delete(app):
    with app.app_context():
        store = CatalogStore()
        item = store.create(machinery_fields())
        identifier = item.identifier
        store.delete(item)
        assert store.get(identifier) is None


def test_category_slug_follows_name(app):
    with app.app_context():
        store = CategoryStore()
        category = store.create({'name': 'Wheel Loaders', 'order': 2})
        assert category.slug == 'wheel-loaders'
        store.update(category, {'name': 'Wheel Loaders & Dozers'})
        assert category.slug == 'wheel-loaders-dozers'
        store.update(category, {'order': 5})
        assert category.slug == 'wheel-loaders-dozers'


def test_backfill_fills_only_missing_slugs(app):
    with app.app_context():
        legacy = MachineryItem(**machinery_fields(name='Old Crane', category='Cranes'), slug='', category_slug='')
        db.session.add(legacy)
        db.session.add(Category(name='Generators', slug=''))
        create_machinery()
        db.session.commit()

        assert backfill_slugs() == BackfillResult(2, [])
        assert legacy.slug == 'old-crane'
        assert legacy.category_slug == 'cranes'
        assert db.session.scalar(db.select(Category).filter_by(name='Generators')).slug == 'generators'
        assert backfill_slugs() == BackfillResult(0, [])


def test_backfill_command(app, runner):
    result = runner.invoke(args=['backfill-slugs'])
    assert result.exit_code == 0
    assert 'Updated 0 records with slugs' in result.output


def test_backfill_skips_record_whose_slug_clashes(app):
    with app.app_context():
        create_machinery()
        clashing = MachineryItem(**machinery_fields(), slug='', category_slug='')
        other = MachineryItem(**machinery_fields(name='Old Crane', category='Cranes'),
                              slug='old-crane', category_slug='')
        db.session.add_all([clashing, other])
        db.session.commit()
        clashing_id = clashing.identifier

        result = backfill_slugs()

        assert result.updated == 1
        assert result.skipped == [f'machinery item {clashing_id}']
        assert clashing.slug == ''
        assert other.category_slug == 'cranes'
        # Session is usable again after the rollback
        assert len(CatalogStore().list()) == 3


def test_backfill_command_reports_skipped_records(app, runner):
    with app.app_context():
        create_machinery()
        clashing = MachineryItem(**machinery_fields(), slug='', category_slug='')
        db.session.add(clashing)
        db.session.commit()
        clashing_id = clashing.identifier

    result = runner.invoke(args=['backfill-slugs'])
    assert result.exit_code == 0
    assert 'Updated 0 records with slugs' in result.output
    assert 'Skipped 1 records' in result.output
    assert f'machinery item {clashing_id}' in result.output


def test_category_named_detail_is_rejected(app):
    with app.app_context():
        store = CategoryStore()
        with pytest.raises(ReservedSlug):
            store.create({'name': 'Detail'})
        assert store.list() == []

        category = store.create({'name': 'Cranes'})
        with pytest.raises(ReservedSlug):
            store.update(category, {'name': 'Detail'})
        assert category.name == 'Cranes'
        assert category.slug == 'cranes'


def test_entry_category_detail_is_rejected(app):
    with app.app_context():
        with pytest.raises(ReservedSlug):
            CatalogStore().create(machinery_fields(category='Detail'))
        assert CatalogStore().list() == []


def test_canonical_path_in_dict(app):
    with app.app_context():
        item = CatalogStore().create(machinery_fields())
        assert item.to_dict()['canonicalPath'] == '/en/catalog/metalworking/lathe-200'
        assert item.to_dict('ja')['canonicalPath'] == '/ja/catalog/metalworking/lathe-200'

        legacy = MachineryItem(**machinery_fields(name='Old Crane'), slug='', category_slug='')
        db.session.add(legacy)
        db.session.commit()
        assert legacy.to_dict()['canonicalPath'] == f'/en/catalog/machinery/{legacy.identifier}'

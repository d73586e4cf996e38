# machinery_site/cli.py
# Flask CLI commands (run with `flask --app run backfill-slugs`).

import logging
from collections import namedtuple
import click
from machinery_site import db
from machinery_site.catalog import CatalogStore, CategoryStore
from machinery_site.catalog.store import commit_slug
from machinery_site.exceptions import CatalogError
from machinery_site.models import Category, MachineryItem

logger = logging.getLogger(__name__)

BackfillResult = namedtuple('BackfillResult', ['updated', 'skipped'])


def _backfill_record(store, record, label):
    """Prepares and commits one record; returns False when it had to be skipped."""
    try:
        with db.session.no_autoflush:
            store.prepare_for_commit(record)
        commit_slug(record.slug)
    except CatalogError as e:
        db.session.rollback()
        logger.error(f"Error updating {label}: {e.message}")
        return False
    return True


def backfill_slugs():
    """
    Fills in slugs missing on records created before slugs existed.
    Existing slugs are left alone. Each record is committed on its own, so a
    slug clash or reserved slug skips that record and the rest still go through.
    Returns a BackfillResult with the changed records and the skipped labels.
    """
    catalog = CatalogStore()
    categories = CategoryStore()
    updated = 0
    skipped = []

    items = db.session.scalars(db.select(MachineryItem)).all()
    pending = [(item, item.identifier) for item in items if not (item.slug and item.category_slug)]
    for item, identifier in pending:
        label = f"machinery item {identifier}"
        if _backfill_record(catalog, item, label):
            logger.info(f"Backfilled slugs for {identifier}: {item.category_slug}/{item.slug}")
            updated += 1
        else:
            skipped.append(label)

    rows = db.session.scalars(db.select(Category)).all()
    pending = [(category, category.id) for category in rows if not category.slug]
    for category, category_id in pending:
        label = f"category {category_id}"
        if _backfill_record(categories, category, label):
            logger.info(f"Backfilled slug for category {category_id}: {category.slug}")
            updated += 1
        else:
            skipped.append(label)

    return BackfillResult(updated, skipped)


def register_commands(app):
    @app.cli.command('backfill-slugs')
    def backfill_slugs_command():
        """Compute slugs for catalog entries and categories that lack them."""
        result = backfill_slugs()
        click.echo(f"Updated {result.updated} records with slugs")
        if result.skipped:
            click.echo(f"Skipped {len(result.skipped)} records:")
            for label in result.skipped:
                click.echo(f"  {label}")

# machinery_site/catalog/store.py
# Read/write access to catalog entries and categories.
#
# Every create/update goes through prepare_for_commit() before the session is
# committed, so derived fields (slug, category_slug, price strings) are always
# in sync with the display values that produced them.

import logging
from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from machinery_site import db
from machinery_site.catalog.paths import FALLBACK_CATEGORY_SLUG, RESERVED_CATEGORY_SLUGS
from machinery_site.exceptions import DuplicateSlug, ReservedSlug
from machinery_site.models import Category, MachineryItem
from machinery_site.slugify import slugify

logger = logging.getLogger(__name__)

# Fields an admin may set directly on a machinery entry
MACHINERY_FIELDS = (
    'name', 'category', 'subcategory', 'manufacturer', 'model_number', 'year',
    'hours', 'price', 'location', 'condition', 'weight', 'featured',
    'availability', 'description', 'specifications', 'images', 'tags',
)

CATEGORY_FIELDS = ('name', 'description', 'image', 'parent_id', 'order', 'is_active')


def format_price(amount, symbol):
    if float(amount).is_integer():
        return f'{symbol}{int(amount):,}'
    return f'{symbol}{amount:,.2f}'


def commit_slug(slug):
    """Commits the session; a uniqueness violation becomes DuplicateSlug."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.error(f"Uniqueness violation committing slug '{slug}': {e.orig}")
        raise DuplicateSlug(slug) from e


class CatalogStore:
    """Catalog entries backed by the MachineryItem table."""

    def find_by_id(self, identifier):
        """Projection lookup: returns {'slug', 'category_slug'} or None."""
        row = db.session.execute(
            db.select(MachineryItem.slug, MachineryItem.category_slug)
            .filter_by(identifier=identifier)
        ).first()
        if row is None:
            return None
        return {'slug': row.slug, 'category_slug': row.category_slug}

    def get(self, identifier):
        return db.session.scalar(db.select(MachineryItem).filter_by(identifier=identifier))

    def find_by_path(self, category_slug, slug):
        return db.session.scalar(
            db.select(MachineryItem).filter_by(category_slug=category_slug, slug=slug)
        )

    def list(self, category_slug=None, featured=None, search=None, limit=None):
        query = db.select(MachineryItem)
        if category_slug:
            query = query.filter(MachineryItem.category_slug == category_slug)
        if featured is not None:
            query = query.filter(MachineryItem.featured.is_(featured))
        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                MachineryItem.name.ilike(pattern),
                MachineryItem.manufacturer.ilike(pattern),
                MachineryItem.model_number.ilike(pattern),
            ))
        query = query.order_by(MachineryItem.created_at.desc(), MachineryItem.id.desc())
        if limit:
            query = query.limit(limit)
        return db.session.scalars(query).all()

    def category_counts(self):
        rows = db.session.execute(
            db.select(MachineryItem.category_slug, func.count(MachineryItem.id))
            .group_by(MachineryItem.category_slug)
        ).all()
        return {category_slug: count for category_slug, count in rows}

    def prepare_for_commit(self, item, name_changed=False, category_changed=False,
                           price_changed=False, slug_override=None):
        """Recomputes derived fields ahead of a commit."""
        if slug_override:
            item.slug = slugify(slug_override)
        elif name_changed or not item.slug:
            item.slug = slugify(item.name)

        if category_changed or not item.category_slug:
            item.category_slug = slugify(item.category) if item.category else FALLBACK_CATEGORY_SLUG
        if item.category_slug in RESERVED_CATEGORY_SLUGS:
            raise ReservedSlug(item.category_slug)

        if (price_changed or not item.price_formatted) and item.price and item.price > 0:
            rate = current_app.config.get('JPY_EXCHANGE_RATE', 110)
            item.price_formatted = format_price(item.price, '$')
            item.price_jpy = format_price(item.price * rate, '¥')

    def create(self, fields, slug=None):
        item = MachineryItem(**{k: v for k, v in fields.items() if k in MACHINERY_FIELDS})
        self.prepare_for_commit(item, name_changed=True, category_changed=True,
                                price_changed=True, slug_override=slug)
        db.session.add(item)
        commit_slug(item.slug)
        logger.info(f"Created machinery item {item.identifier} ({item.category_slug}/{item.slug})")
        return item

    def update(self, item, fields, slug=None):
        changed = set()
        for key, value in fields.items():
            if key in MACHINERY_FIELDS and getattr(item, key) != value:
                setattr(item, key, value)
                changed.add(key)
        try:
            self.prepare_for_commit(
                item,
                name_changed='name' in changed,
                category_changed='category' in changed,
                price_changed='price' in changed,
                slug_override=slug,
            )
        except ReservedSlug:
            db.session.rollback()
            raise
        commit_slug(item.slug)
        logger.info(f"Updated machinery item {item.identifier}: {sorted(changed)}")
        return item

    def delete(self, item):
        identifier = item.identifier
        db.session.delete(item)
        db.session.commit()
        logger.info(f"Deleted machinery item {identifier}")


class CategoryStore:
    """Categories; slugs follow the same explicit pre-commit step as entries."""

    def get(self, category_id):
        return db.session.get(Category, category_id)

    def find_by_slug(self, slug):
        return db.session.scalar(db.select(Category).filter_by(slug=slug))

    def list(self, active_only=False):
        query = db.select(Category)
        if active_only:
            query = query.filter(Category.is_active.is_(True))
        return db.session.scalars(query.order_by(Category.order, Category.name)).all()

    def prepare_for_commit(self, category, name_changed=False):
        if name_changed or not category.slug:
            category.slug = slugify(category.name)
        # /<lang>/catalog/detail/<id> is the legacy redirect route
        if category.slug in RESERVED_CATEGORY_SLUGS:
            raise ReservedSlug(category.slug)

    def create(self, fields):
        category = Category(**{k: v for k, v in fields.items() if k in CATEGORY_FIELDS})
        self.prepare_for_commit(category, name_changed=True)
        db.session.add(category)
        commit_slug(category.slug)
        logger.info(f"Created category {category.slug}")
        return category

    def update(self, category, fields):
        name_changed = 'name' in fields and fields['name'] != category.name
        for key, value in fields.items():
            if key in CATEGORY_FIELDS:
                setattr(category, key, value)
        try:
            self.prepare_for_commit(category, name_changed=name_changed)
        except ReservedSlug:
            db.session.rollback()
            raise
        commit_slug(category.slug)
        logger.info(f"Updated category {category.id} ({category.slug})")
        return category

    def delete(self, category):
        slug = category.slug
        db.session.delete(category)
        db.session.commit()
        logger.info(f"Deleted category {slug}")

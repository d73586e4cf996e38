# machinery_site/content/store.py
# Read/write access to brands, pages and inquiries.

import logging
from machinery_site import db
from machinery_site.catalog.store import commit_slug
from machinery_site.exceptions import InvalidContentBlock
from machinery_site.models import Brand, PageContent, SellBuyInquiry, new_identifier
from machinery_site.slugify import slugify

logger = logging.getLogger(__name__)

BLOCK_TYPES = ('text', 'image', 'hero', 'gallery', 'cta', 'feature')

# Block fields holding {'en': ..., 'ja': ...}
LOCALIZED_BLOCK_FIELDS = ('title', 'subtitle', 'content', 'buttonText')

BRAND_FIELDS = ('name', 'logo', 'order', 'is_active')

PAGE_FIELDS = ('title_en', 'title_ja', 'description_en', 'description_ja', 'is_published')

INQUIRY_FIELDS = (
    'form_type', 'name', 'email', 'phone', 'company', 'machine_type',
    'machine_make', 'machine_model', 'machine_year', 'machine_condition',
    'budget', 'timeline', 'additional_info',
)


def _localized_text(index, field, value):
    if not isinstance(value, dict) or set(value) - {'en', 'ja'}:
        raise InvalidContentBlock(index, f"'{field}' must be an object with 'en' and 'ja' text")
    return {lang: str(value.get(lang) or '') for lang in ('en', 'ja')}


def normalize_blocks(blocks):
    """
    Validates page-builder blocks and returns them sorted by 'order'.

    Each block needs a known 'type'. Blocks without an 'id' get one, and
    blocks without an 'order' keep their position in the list.
    """
    if not isinstance(blocks, list):
        raise InvalidContentBlock(None, "blocks must be a list")

    normalized = []
    for index, block in enumerate(blocks):
        if not isinstance(block, dict):
            raise InvalidContentBlock(index, "must be an object")
        if block.get('type') not in BLOCK_TYPES:
            raise InvalidContentBlock(index, f"type must be one of {', '.join(BLOCK_TYPES)}")
        try:
            order = int(block.get('order', index))
        except (TypeError, ValueError):
            raise InvalidContentBlock(index, "order must be a number")

        result = {'id': str(block.get('id') or new_identifier()), 'type': block['type'], 'order': order}
        for field in LOCALIZED_BLOCK_FIELDS:
            if block.get(field) is not None:
                result[field] = _localized_text(index, field, block[field])
        for field in ('image', 'link'):
            if block.get(field):
                result[field] = str(block[field])
        if block.get('images') is not None:
            if not isinstance(block['images'], list):
                raise InvalidContentBlock(index, "images must be a list")
            result['images'] = [str(url) for url in block['images']]
        normalized.append(result)

    return sorted(normalized, key=lambda block: block['order'])


class BrandStore:
    """Manufacturer logos shown on the public site, in display order."""

    def get(self, brand_id):
        return db.session.get(Brand, brand_id)

    def list(self, active_only=False):
        query = db.select(Brand)
        if active_only:
            query = query.filter(Brand.is_active.is_(True))
        return db.session.scalars(query.order_by(Brand.order, Brand.id)).all()

    def next_order(self):
        highest = db.session.scalar(db.select(db.func.max(Brand.order)))
        return 0 if highest is None else highest + 1

    def create(self, fields):
        brand = Brand(**{k: v for k, v in fields.items() if k in BRAND_FIELDS})
        if brand.order is None:
            brand.order = self.next_order()
        db.session.add(brand)
        db.session.commit()
        logger.info(f"Created brand {brand.id} ({brand.name})")
        return brand

    def update(self, brand, fields):
        for key, value in fields.items():
            if key in BRAND_FIELDS and value is not None:
                setattr(brand, key, value)
        db.session.commit()
        logger.info(f"Updated brand {brand.id} ({brand.name})")
        return brand

    def reorder(self, brand_ids):
        """Sets each brand's order to its position in brand_ids."""
        brands = {brand.id: brand for brand in self.list()}
        unknown = [brand_id for brand_id in brand_ids if brand_id not in brands]
        if unknown:
            raise ValueError(f"Unknown brand ids: {unknown}")
        for position, brand_id in enumerate(brand_ids):
            brands[brand_id].order = position
        db.session.commit()
        logger.info(f"Reordered brands: {brand_ids}")
        return self.list()

    def delete(self, brand):
        name = brand.name
        db.session.delete(brand)
        db.session.commit()
        logger.info(f"Deleted brand {name}")


class PageStore:
    """Page-builder pages; slugs follow the catalog's pre-commit step."""

    def get(self, page_id):
        return db.session.get(PageContent, page_id)

    def find_by_slug(self, slug, published_only=False):
        query = db.select(PageContent).filter_by(slug=slug)
        if published_only:
            query = query.filter(PageContent.is_published.is_(True))
        return db.session.scalar(query)

    def list(self, published_only=False):
        query = db.select(PageContent)
        if published_only:
            query = query.filter(PageContent.is_published.is_(True))
        return db.session.scalars(query.order_by(PageContent.slug)).all()

    def prepare_for_commit(self, page, slug_override=None):
        if slug_override:
            page.slug = slugify(slug_override)
        elif not page.slug:
            page.slug = slugify(page.title_en)

    def create(self, fields, slug=None, blocks=None):
        page = PageContent(**{k: v for k, v in fields.items() if k in PAGE_FIELDS})
        page.blocks = normalize_blocks(blocks or [])
        self.prepare_for_commit(page, slug_override=slug)
        db.session.add(page)
        commit_slug(page.slug)
        logger.info(f"Created page {page.slug}")
        return page

    def update(self, page, fields, slug=None, blocks=None):
        # Validate before touching the row so a bad block leaves it unchanged
        normalized = normalize_blocks(blocks) if blocks is not None else None
        for key, value in fields.items():
            if key in PAGE_FIELDS:
                setattr(page, key, value)
        if normalized is not None:
            page.blocks = normalized
        self.prepare_for_commit(page, slug_override=slug)
        commit_slug(page.slug)
        logger.info(f"Updated page {page.id} ({page.slug})")
        return page

    def delete(self, page):
        slug = page.slug
        db.session.delete(page)
        db.session.commit()
        logger.info(f"Deleted page {slug}")


class InquiryStore:
    """Sell/buy requests submitted from the public forms."""

    def create(self, fields, ip_address=None):
        inquiry = SellBuyInquiry(**{k: v for k, v in fields.items() if k in INQUIRY_FIELDS})
        inquiry.ip_address = ip_address
        db.session.add(inquiry)
        db.session.commit()
        logger.info(f"Received {inquiry.form_type} inquiry {inquiry.id} from {inquiry.email}")
        return inquiry

    def list(self, form_type=None):
        query = db.select(SellBuyInquiry)
        if form_type:
            query = query.filter(SellBuyInquiry.form_type == form_type)
        return db.session.scalars(
            query.order_by(SellBuyInquiry.submitted_at.desc(), SellBuyInquiry.id.desc())
        ).all()

# machinery_site/content/__init__.py
# Site content outside the catalog: brand logos, page-builder pages and
# sell/buy inquiries.

from machinery_site.content.store import (  # noqa: F401
    BLOCK_TYPES,
    BrandStore,
    InquiryStore,
    PageStore,
    normalize_blocks,
)

# machinery_site/catalog/__init__.py
# Catalog store and legacy-URL resolution.

from machinery_site.catalog.paths import (  # noqa: F401
    FALLBACK_CATEGORY_SLUG,
    RESERVED_CATEGORY_SLUGS,
    canonical_path,
)
from machinery_site.catalog.store import CatalogStore, CategoryStore  # noqa: F401
from machinery_site.catalog.resolver import resolve_canonical_path  # noqa: F401

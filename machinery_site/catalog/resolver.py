# machinery_site/catalog/resolver.py
# Maps a legacy catalog identifier to the entry's current public path.

import logging
import re
from machinery_site.catalog.paths import FALLBACK_CATEGORY_SLUG, canonical_path, listing_path  # noqa: F401
from machinery_site.exceptions import EntryNotFound, InvalidIdentifierShape

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r'^[0-9a-fA-F]{24}$')

# Evaluated in order; each segment falls back when the stored value is empty
PATH_SEGMENT_FALLBACKS = (
    ('category_slug', lambda identifier: FALLBACK_CATEGORY_SLUG),
    ('slug', lambda identifier: identifier),
)


def is_valid_identifier(identifier):
    return isinstance(identifier, str) and bool(IDENTIFIER_PATTERN.match(identifier))


def normalize_identifier(identifier):
    """Stored identifiers are lowercase; legacy links may not be."""
    if not is_valid_identifier(identifier):
        raise InvalidIdentifierShape(identifier)
    return identifier.lower()


def lookup_entry(identifier, store):
    """
    Validates the identifier shape, then performs exactly one store lookup
    with the lowercased identifier.

    Raises InvalidIdentifierShape before touching the store, or EntryNotFound
    when the lookup comes back empty. Store errors are not caught here.
    """
    identifier = normalize_identifier(identifier)
    entry = store.find_by_id(identifier)
    if entry is None:
        raise EntryNotFound(identifier)
    return entry


def resolve_canonical_path(identifier, lang, store):
    """
    Returns the canonical path for a legacy identifier, or the locale's
    catalog listing when it cannot be resolved. Malformed and unknown
    identifiers both yield the listing path.
    """
    try:
        entry = lookup_entry(identifier, store)
    except (InvalidIdentifierShape, EntryNotFound) as e:
        logger.info(f"Legacy identifier not resolved, falling back to listing: {e.message}")
        return listing_path(lang)

    identifier = identifier.lower()
    segments = {}
    for field, fallback in PATH_SEGMENT_FALLBACKS:
        segments[field] = entry.get(field) or fallback(identifier)

    path = canonical_path(lang, segments['category_slug'], segments['slug'])
    logger.debug(f"Resolved legacy identifier {identifier} to {path}")
    return path

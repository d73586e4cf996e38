# machinery_site/catalog/paths.py
# Public URL shapes for the catalog. Imported by the models, so it must not
# import them back.

# Category token used when an entry's category cannot be determined
FALLBACK_CATEGORY_SLUG = 'machinery'

# First path segments under /<lang>/catalog/ that are routes, not categories
RESERVED_CATEGORY_SLUGS = frozenset({'detail'})


def listing_path(lang):
    return f'/{lang}/catalog'


def canonical_path(lang, category_slug, slug):
    return f'/{lang}/catalog/{category_slug}/{slug}'

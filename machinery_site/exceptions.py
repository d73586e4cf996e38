# machinery_site/exceptions.py
# Errors raised by the catalog layer.


class CatalogError(Exception):
    """Base class for catalog errors."""

    def __init__(self, message, identifier=None):
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class InvalidIdentifierShape(CatalogError):
    """The identifier is not a 24 character hex string; no lookup was made."""

    def __init__(self, identifier):
        super().__init__(f"Malformed catalog identifier: {identifier!r}", identifier)


class EntryNotFound(CatalogError):
    """The identifier is well formed but no catalog entry carries it."""

    def __init__(self, identifier):
        super().__init__(f"No catalog entry with identifier {identifier!r}", identifier)


class DuplicateSlug(CatalogError):
    """A write would give two records the same slug."""

    def __init__(self, slug):
        super().__init__(f"Slug '{slug}' is already in use")
        self.slug = slug


class ReservedSlug(CatalogError):
    """The slug would collide with a fixed route segment."""

    def __init__(self, slug):
        super().__init__(f"Slug '{slug}' is reserved")
        self.slug = slug


class InvalidContentBlock(CatalogError):
    """A page content block is missing its type or carries a malformed field."""

    def __init__(self, index, reason):
        prefix = "Content blocks" if index is None else f"Content block {index}"
        super().__init__(f"{prefix}: {reason}")
        self.index = index

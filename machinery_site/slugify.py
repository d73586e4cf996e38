# machinery_site/slugify.py
import re
import unicodedata

DEFAULT_SEPARATOR = '-'

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(value, separator=DEFAULT_SEPARATOR):
    """
    Turns a display name into a URL-safe token.

    Diacritics are stripped, the text is lowercased, and every run of
    characters outside [a-z0-9] becomes a single separator. The result
    never starts or ends with the separator. Input that normalizes to
    nothing yields the separator itself, so a slug is never empty.
    """
    if not value:
        return separator

    decomposed = unicodedata.normalize('NFKD', value.lower())
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _NON_ALNUM.sub(separator, stripped.lower())

    sep = re.escape(separator)
    slug = re.sub(f'(?:{sep}){{2,}}', separator, slug)
    slug = re.sub(f'^(?:{sep})+|(?:{sep})+$', '', slug)

    return slug or separator

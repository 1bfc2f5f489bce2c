# Escaping for field values in the inline ("CQ code") notation.
#
# Only field values are escaped; tags and field names never contain reserved
# characters.  "&" goes first on the way in and last on the way out, otherwise
# an already-escaped sequence would be processed twice.

_ESCAPES: list[tuple[str, str]] = [
    ("&", "&amp;"),
    ("[", "&#91;"),
    ("]", "&#93;"),
    (",", "&#44;"),
]


def escape(text: str) -> str:
    """Replace the four reserved characters with their entity sequences."""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def unescape(text: str) -> str:
    """Exact inverse of :func:`escape`."""
    for char, entity in reversed(_ESCAPES):
        text = text.replace(entity, char)
    return text

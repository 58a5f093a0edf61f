"""
URL extraction from free text.

Finds URL-like substrings (with or without a scheme), keeps the raw match for
display and builds a scheme-qualified form that a URL parser will accept.
"""

import re
from typing import Iterator, List

from ..types import ExtractedLink

# Left-to-right, non-overlapping, case-insensitive. The dotted-host branch is
# tried first; the bare scheme branch catches runs such as "http://user@host".
# Label length and count follow DNS limits so a failed attempt at one start
# position never rescans the rest of the text.
_URL_RE = re.compile(
    r"""(?xi)
    \b
    (?:
        (?:https?://)?                  # optional scheme
        (?:[a-z0-9_-]{1,63}\.){1,126}   # one or more "label." segments
        [a-z]{2,63}                     # top-level label
        (?:/[^\s]*)?                    # optional path/query
      |
        https?://\S+                    # scheme without a dotted host
    )
    """
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def iter_urls(text: str) -> Iterator[ExtractedLink]:
    """Lazily yield links in the order they appear."""
    for m in _URL_RE.finditer(text):
        raw = m.group(0)
        explicit = bool(_SCHEME_RE.match(raw))
        normalized = raw if explicit else "http://" + raw
        yield ExtractedLink(raw=raw, normalized=normalized, has_explicit_scheme=explicit)


def extract_urls(text: str) -> List[ExtractedLink]:
    """Return every URL-like substring of `text` as an ordered list."""
    if not text:
        return []
    return list(iter_urls(text))

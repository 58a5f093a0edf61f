"""
Per-link structural and lexical red flags.

One LinkFinding per extracted link, in extraction order. A link that does not
parse becomes a "Malformed URL" finding; it never aborts the batch.
"""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from ..config import DEFAULT_CONFIG, HeuristicsConfig
from ..types import ExtractedLink, LinkFinding
from .edit_distance import edit_distance

logger = logging.getLogger(__name__)

MALFORMED = "Malformed URL"
FLAG_IP_HOST = "IP-only host"
FLAG_MANY_DOTS = "Many dots in hostname"
FLAG_AT_SIGN = "'@' present in URL"
FLAG_LOOKALIKE = "Possible brand lookalike"

_IP_HOST_RE = re.compile(r"^[0-9.]+$")
_LABEL_SPLIT_RE = re.compile(r"[.-]")
_BRAND_SUFFIX_RE = re.compile(r"[\d-]+$")


def suspicious_tld_flag(tld: str) -> str:
    return f"Suspicious TLD .{tld}"


def _parse_host(normalized: str) -> Optional[str]:
    """Hostname of a URL, or None when the URL does not parse."""
    try:
        host = urlsplit(normalized).hostname
    except ValueError:
        return None
    return host or None


def _lookalike_candidates(host: str) -> List[str]:
    """The host without a leading www. plus its non-TLD labels."""
    bare = host[4:] if host.startswith("www.") else host
    candidates = [bare]
    labels = bare.split(".")
    if len(labels) > 1:
        for token in _LABEL_SPLIT_RE.split(".".join(labels[:-1])):
            if token and token not in candidates:
                candidates.append(token)
    return candidates


def brand_stem(brand: str) -> str:
    """Brand keyword without its trailing digits and dashes: "paypal-1" -> "paypal"."""
    return _BRAND_SUFFIX_RE.sub("", brand) or brand


def lookalike_brands(host: str, config: HeuristicsConfig = DEFAULT_CONFIG) -> List[str]:
    """Brands the host resembles without matching exactly."""
    candidates = _lookalike_candidates(host)
    hits: List[str] = []
    for brand in config.brand_keywords:
        # A label spelling the brand itself is the genuine site.
        if brand_stem(brand) in candidates:
            continue
        dist = min(edit_distance(c, brand) for c in candidates)
        if 0 < dist <= config.lookalike_max_distance:
            hits.append(brand)
    return hits


def analyze_link(link: ExtractedLink, config: HeuristicsConfig = DEFAULT_CONFIG) -> LinkFinding:
    host = _parse_host(link.normalized)
    if host is None:
        logger.debug("Malformed link skipped during analysis")
        return LinkFinding(url=link.raw, normalized=None, host="-", tld="-", flags=(MALFORMED,))

    tld = host.rsplit(".", 1)[1] if "." in host else ""

    flags: List[str] = []
    if _IP_HOST_RE.match(host):
        flags.append(FLAG_IP_HOST)
    if host.count(".") >= 3:
        flags.append(FLAG_MANY_DOTS)
    # Checked on the raw match: normalisation never adds an "@".
    if "@" in link.raw:
        flags.append(FLAG_AT_SIGN)
    if tld.lower() in config.suspicious_tlds:
        flags.append(suspicious_tld_flag(tld))
    if lookalike_brands(host, config):
        flags.append(FLAG_LOOKALIKE)

    return LinkFinding(
        url=link.raw,
        normalized=link.normalized,
        host=host,
        tld=tld,
        flags=tuple(flags),
    )


def analyze_links(
    links: Iterable[ExtractedLink], config: HeuristicsConfig = DEFAULT_CONFIG
) -> List[LinkFinding]:
    return [analyze_link(link, config) for link in links]

"""Pure parsing helpers for raw feed values."""

import re
from typing import Any, Optional

from import_properties.models import DEFAULT_PROPERTY_TYPE, PROPERTY_TYPES

PRICE_RE = re.compile(r"(\d+(?:\.\d+)*)")
LEADING_INT_RE = re.compile(r"^\s*[+]?(\d+)")
DIGIT_RUN_RE = re.compile(r"(\d+)")
NUMERIC_ENTITY_RE = re.compile(r"&#(x[0-9a-fA-F]+|\d+);")
HTML_TAG_RE = re.compile(r"<[^>]+>")

# Decoded in order. &amp; is absent here and handled last so that an escaped
# entity such as "&amp;lt;" ends up as the literal "&lt;".
HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    ("&hellip;", "…"),
    ("&mdash;", "—"),
    ("&ndash;", "–"),
    ("&lsquo;", "'"),
    ("&rsquo;", "'"),
    ("&ldquo;", '"'),
    ("&rdquo;", '"'),
)

# First match wins. "villa" is tested before the generic "house".
PROPERTY_TYPE_KEYWORDS = (
    (("villa", "detached"), "villa"),
    (("apartment", "flat"), "apartment"),
    (("house",), "house"),
    (("penthouse",), "penthouse"),
    (("townhouse",), "townhouse"),
    (("commercial",), "commercial"),
    (("land",), "land"),
)


def decode_html_entities(text: Optional[str]) -> Optional[str]:
    """Decode the fixed entity table plus numeric references, &amp; last."""
    if not text:
        return text

    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)
    text = NUMERIC_ENTITY_RE.sub(_decode_numeric_entity, text)
    return text.replace("&amp;", "&")


def _decode_numeric_entity(match: re.Match) -> str:
    code = match.group(1)
    codepoint = int(code[1:], 16) if code[0] in "xX" else int(code)
    # NUL and lone surrogates cannot be stored as UTF-8 text
    if codepoint == 0 or 0xD800 <= codepoint <= 0xDFFF:
        return match.group(0)
    try:
        return chr(codepoint)
    except (ValueError, OverflowError):
        return match.group(0)


def strip_html_tags(text: Optional[str]) -> Optional[str]:
    """Remove markup tags, keeping their text content."""
    if not text:
        return text
    return HTML_TAG_RE.sub("", text)


def parse_price(value: Any) -> int:
    """
    Parse a free-text price into whole currency units.

    The first run of digits and dot-separated groups is taken and the dots
    (thousands separators) removed: "590.000 €" -> 590000. Never raises;
    missing or unmatched input gives 0.
    """
    if value is None:
        return 0
    match = PRICE_RE.search(str(value))
    if not match:
        return 0
    return int(match.group(1).replace(".", ""))


def parse_int(value: Any) -> Optional[int]:
    """Parse a leading integer ("3", " 4 beds"); None when absent or unparsable."""
    if value is None:
        return None
    match = LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def parse_leading_int(value: Any) -> Optional[int]:
    """Extract the first digit run from mixed text ("120 m²" -> 120)."""
    if value is None:
        return None
    match = DIGIT_RUN_RE.search(str(value))
    return int(match.group(1)) if match else None


def infer_property_type(title: Optional[str]) -> str:
    """Classify a property from keywords in its title."""
    title_lower = (title or "").lower()
    for keywords, property_type in PROPERTY_TYPE_KEYWORDS:
        if any(keyword in title_lower for keyword in keywords):
            return property_type
    return DEFAULT_PROPERTY_TYPE


def coerce_property_type(value: Any) -> Optional[str]:
    """Return the feed's own type when it names a known property type."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    return candidate if candidate in PROPERTY_TYPES else None

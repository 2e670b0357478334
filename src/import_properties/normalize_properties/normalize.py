"""Map raw feed records into the canonical property schema."""

import logging
from typing import Any, Optional

from import_properties.config import NormalizeConfig
from import_properties.models import FeedRecord, NormalizedProperty
from import_properties.normalize_properties.parsers import (
    coerce_property_type,
    decode_html_entities,
    infer_property_type,
    parse_int,
    parse_leading_int,
    parse_price,
    strip_html_tags,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Property"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_CITY = "Unknown City"
PREFERRED_TEXT_LOCALE = "en"


def normalize_property(record: FeedRecord, index: int, config: NormalizeConfig) -> NormalizedProperty:
    """Normalize one feed record. ``index`` is the record's position in the feed."""
    reference = record.reference or f"property_{index}"

    title = clean_text(_text(record.title), config) or DEFAULT_TITLE
    description = clean_text(_text(record.description), config) or DEFAULT_DESCRIPTION

    property_type = coerce_property_type(record.property_type) or infer_property_type(title)

    return NormalizedProperty(
        reference=reference,
        title=title,
        description=description,
        property_type=property_type,
        price=parse_price(_text(record.price)),
        country=config.country,
        city=_text(record.location) or DEFAULT_CITY,
        bedrooms=parse_int(_text(record.rooms)),
        bathrooms=parse_int(_text(record.baths)),
        area=parse_leading_int(_text(record.area)),
        plot_area=parse_leading_int(_text(record.plot)),
        terrace=_text(record.terrace),
        ibi_fees=_text(record.ibi_fees),
        community_fees=_text(record.community_fees),
        basura_tax=_text(record.basura_tax),
        image_urls=flatten_images(record.images, config.max_images),
    )


def clean_text(text: Optional[str], config: NormalizeConfig) -> Optional[str]:
    if not text:
        return text
    if config.strip_html:
        text = strip_html_tags(text)
    return decode_html_entities(text).strip()


def flatten_images(images: Any, max_images: int) -> list[str]:
    """
    Flatten a scalar-or-list image field into at most ``max_images`` URLs.

    Blank entries are dropped before truncating; selection is positional.
    """
    if images is None:
        return []
    if not isinstance(images, (list, tuple)):
        images = [images]

    urls = []
    for image in images:
        url = _text(image)
        if url:
            urls.append(url)

    if len(urls) > max_images:
        logger.debug("Truncating %d images to %d", len(urls), max_images)
    return urls[: max(max_images, 0)]


def _text(value: Any) -> Optional[str]:
    """Coerce a loosely typed feed value to stripped text.

    Localized fields arrive as a mapping of locale -> text; English is
    preferred, otherwise the first non-empty value.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        preferred = _text(value.get(PREFERRED_TEXT_LOCALE))
        if preferred:
            return preferred
        for item in value.values():
            text = _text(item)
            if text:
                return text
        return None
    if isinstance(value, (list, tuple)):
        return _text(value[0]) if value else None
    text = str(value).strip()
    return text or None

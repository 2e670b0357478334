"""Parse a property feed document into loosely typed records."""

import logging
import re
from typing import Any

from lxml import etree

from import_properties.errors import MalformedFeed
from import_properties.models import FeedRecord

logger = logging.getLogger(__name__)

CONTAINER_TAGS = {"root", "properties"}
PROPERTY_TAG = "property"

# Named entities other than the five XML ones (HTML leftovers such as &nbsp;)
UNDECLARED_ENTITY_RE = re.compile(rb"&(?!(?:amp|lt|gt|quot|apos|#\d+|#x[0-9a-fA-F]+);)")


def parse_feed(content: bytes) -> list[FeedRecord]:
    """
    Parse feed XML into FeedRecords.

    A document holding a single <property> yields a one-element list, the same
    as a container holding many.

    Raises:
        MalformedFeed: if the document is not XML or has an unexpected root.
    """
    content = escape_undeclared_entities(content)
    parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
    try:
        root = etree.fromstring(content, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise MalformedFeed(f"Feed is not valid XML: {e}") from e

    root_tag = _local_name(root.tag)
    if root_tag == PROPERTY_TAG:
        nodes = [root]
    elif root_tag in CONTAINER_TAGS:
        nodes = [
            child
            for child in root
            if isinstance(child.tag, str) and _local_name(child.tag) == PROPERTY_TAG
        ]
    else:
        raise MalformedFeed(f"Unexpected feed root element <{root_tag}>")

    if not nodes:
        logger.warning("Feed contains no <property> elements")

    records = [FeedRecord.from_mapping(element_to_value(node)) for node in nodes]
    logger.info("Parsed %d properties from feed", len(records))
    return records


def element_to_value(element: Any) -> Any:
    """
    Convert an element to plain Python values.

    Leaf elements become stripped text (None when empty); elements with
    children become dicts keyed by child tag, with repeated tags collected
    into lists.
    """
    children = [child for child in element if isinstance(child.tag, str)]
    if not children:
        text = (element.text or "").strip()
        return text or None

    value: dict[str, Any] = {}
    for child in children:
        key = _local_name(child.tag)
        child_value = _image_value(child) if key == "image" else element_to_value(child)
        if key in value:
            existing = value[key]
            if not isinstance(existing, list):
                value[key] = [existing]
            value[key].append(child_value)
        else:
            value[key] = child_value
    return value


def _image_value(element: Any) -> Any:
    """An <image> holds its URL either as text or in a nested <url>."""
    value = element_to_value(element)
    if isinstance(value, dict):
        return value.get("url")
    return value


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname.lower()


def escape_undeclared_entities(content: bytes) -> bytes:
    """
    Escape ampersands that do not start an XML entity.

    HTML entities survive as literal text ("&nbsp;") and are decoded during
    normalization instead of failing the whole document.
    """
    return UNDECLARED_ENTITY_RE.sub(b"&amp;", content)

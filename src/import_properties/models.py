"""Data models for the import_properties pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from common.utils import as_list, get_value

PROPERTY_TYPES = (
    "villa",
    "apartment",
    "house",
    "penthouse",
    "townhouse",
    "commercial",
    "land",
)
DEFAULT_PROPERTY_TYPE = "house"

TRANSLATION_SOURCE = "source"
TRANSLATION_TRANSLATED = "translated"
TRANSLATION_FALLBACK = "fallback"


@dataclass
class FeedRecord:
    """Raw property parsed from a feed <property> node. All values loosely typed."""
    reference: Optional[str] = None
    title: Any = None
    description: Any = None
    location: Any = None
    price: Any = None
    rooms: Any = None
    baths: Any = None
    area: Any = None
    plot: Any = None
    terrace: Any = None
    ibi_fees: Any = None
    community_fees: Any = None
    basura_tax: Any = None
    property_type: Any = None
    images: list[Any] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, raw: Any) -> "FeedRecord":
        """Build a record from a parsed node mapping, ignoring unknown fields."""
        if not isinstance(raw, dict):
            # A text-only <property> carries no fields
            raw = {}

        reference = get_value(raw, "reference") or get_value(raw, "ref")
        images = get_value(raw, "images")
        if isinstance(images, dict):
            images = images.get("image")

        return cls(
            reference=str(reference).strip() if reference else None,
            title=get_value(raw, "title"),
            description=get_value(raw, "description") or get_value(raw, "desc"),
            location=get_value(raw, "location") or get_value(raw, "town"),
            price=get_value(raw, "price"),
            rooms=get_value(raw, "rooms") or get_value(raw, "beds"),
            baths=get_value(raw, "baths"),
            area=get_value(raw, "area"),
            plot=get_value(raw, "plot"),
            terrace=get_value(raw, "terrace"),
            ibi_fees=get_value(raw, "ibi_fees"),
            community_fees=get_value(raw, "community_fees"),
            basura_tax=get_value(raw, "basura_tax"),
            property_type=get_value(raw, "type"),
            images=as_list(images),
        )


@dataclass
class LocaleVariant:
    """Title and description of a property in one locale."""
    locale: str
    title: str
    description: str
    status: str = TRANSLATION_SOURCE


@dataclass
class MediaAsset:
    """An image stored under a key derived from its source URL."""
    source_url: str
    storage_key: str
    object_key: str
    public_url: str


@dataclass
class NormalizedProperty:
    """Property mapped into the canonical schema, enriched stage by stage."""
    reference: str
    title: str
    description: str
    property_type: str
    price: int
    country: str
    city: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[int] = None
    plot_area: Optional[int] = None
    terrace: Optional[str] = None
    ibi_fees: Optional[str] = None
    community_fees: Optional[str] = None
    basura_tax: Optional[str] = None
    image_urls: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    source_locale: Optional[str] = None
    locales: dict[str, LocaleVariant] = field(default_factory=dict)


@dataclass
class RunSummary:
    """Counters for one import run. Only the orchestrator mutates it."""
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    images_uploaded: int = 0
    skipped_duplicates: int = 0
    property_ids: list[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_report(self) -> dict[str, Any]:
        """Machine-readable summary in the shape the admin panel expects."""
        return {
            "success": self.error is None,
            "processed": self.processed,
            "created": self.succeeded,
            "failed": self.failed,
            "images_uploaded": self.images_uploaded,
            "skipped_duplicates": self.skipped_duplicates,
            "property_ids": list(self.property_ids),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
        }

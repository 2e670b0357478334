"""Run a property feed import: fetch, parse, then process each record in turn."""

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Protocol

from import_properties.config import ImportConfig, NormalizeConfig
from import_properties.fetch_feed.fetch_feed import fetch_feed
from import_properties.fetch_feed.parse_feed import parse_feed
from import_properties.localize_properties.localize import Localizer
from import_properties.models import FeedRecord, NormalizedProperty, RunSummary
from import_properties.normalize_properties.normalize import normalize_property
from import_properties.resolve_images.resolve_images import ImageResolver

logger = logging.getLogger(__name__)


class PropertyStore(Protocol):
    def upsert(self, prop: NormalizedProperty) -> None: ...


def dedupe_records(records: list[FeedRecord]) -> tuple[list[FeedRecord], int]:
    """Drop records whose reference already appeared earlier in the feed."""
    seen: set[str] = set()
    unique: list[FeedRecord] = []
    skipped = 0
    for record in records:
        if record.reference and record.reference in seen:
            logger.warning("Skipping duplicate reference in feed: %s", record.reference)
            skipped += 1
            continue
        if record.reference:
            seen.add(record.reference)
        unique.append(record)
    return unique, skipped


def process_record(
    record: FeedRecord,
    index: int,
    normalize_config: NormalizeConfig,
    image_resolver: Optional[ImageResolver],
    localizer: Localizer,
    store: PropertyStore,
) -> NormalizedProperty:
    """
    Take one record through every stage and persist it.

    Raises whatever a stage raises; the caller decides what a failure means.
    """
    prop = normalize_property(record, index, normalize_config)
    logger.info(
        "%s - %s, %s - %d (%s)",
        prop.title,
        prop.city,
        prop.country,
        prop.price,
        prop.property_type,
    )

    if image_resolver is not None and prop.image_urls:
        assets = image_resolver.resolve_all(prop.image_urls, prop.reference)
        prop.images = [asset.public_url for asset in assets]

    prop.source_locale, prop.locales = localizer.localize(prop.title, prop.description)

    store.upsert(prop)
    return prop


def import_properties(
    records: list[FeedRecord],
    normalize_config: NormalizeConfig,
    image_resolver: Optional[ImageResolver],
    localizer: Localizer,
    store: PropertyStore,
) -> RunSummary:
    """
    Import records one at a time. A failure at any stage fails only that record.

    Returns:
        RunSummary with processed, succeeded, failed and image counts.
    """
    summary = RunSummary(started_at=datetime.now(timezone.utc))
    start_time = time.monotonic()

    unique_records, summary.skipped_duplicates = dedupe_records(records)
    summary.processed = len(records)

    total = len(unique_records)
    for index, record in enumerate(unique_records):
        logger.info("Processing property %d/%d (%s)", index + 1, total, record.reference or "no reference")
        try:
            prop = process_record(
                record,
                index,
                normalize_config,
                image_resolver,
                localizer,
                store,
            )
        except Exception as e:
            logger.error(
                "Failed to import property %d/%d (%s): %s",
                index + 1,
                total,
                record.reference or f"property_{index}",
                e,
            )
            summary.failed += 1
            continue

        summary.succeeded += 1
        summary.images_uploaded += len(prop.images)
        summary.property_ids.append(prop.reference)
        logger.info("Saved %s (%d images)", prop.reference, len(prop.images))

    summary.finished_at = datetime.now(timezone.utc)
    log_summary(summary, time.monotonic() - start_time)
    return summary


def run_import(
    config: ImportConfig,
    image_resolver: Optional[ImageResolver],
    localizer: Localizer,
    store: PropertyStore,
) -> RunSummary:
    """
    Fetch and parse the configured feed, then import every record.

    Raises:
        FeedUnavailable, MalformedFeed: the feed cannot be read at all.
    """
    logger.info("Starting property import from %s", config.fetch.feed_url)
    content = fetch_feed(config.fetch.feed_url, config.fetch)
    records = parse_feed(content)
    return import_properties(records, config.normalize, image_resolver, localizer, store)


def log_summary(summary: RunSummary, elapsed: float) -> None:
    logger.info("Import complete in %.2fs", elapsed)
    logger.info("  Processed: %d properties", summary.processed)
    logger.info("  Succeeded: %d properties", summary.succeeded)
    logger.info("  Failed: %d properties", summary.failed)
    logger.info("  Duplicates skipped: %d", summary.skipped_duplicates)
    logger.info("  Images uploaded: %d", summary.images_uploaded)

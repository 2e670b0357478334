"""Helper functions for import_properties CLI."""

from __future__ import annotations

import argparse

from import_properties.config import ImportConfig


def parse_import_properties_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for import_properties."""

    parser = argparse.ArgumentParser(description="Import properties from an XML feed")

    # Input options
    parser.add_argument(
        "--config",
        default=None,
        help="Config name in configs/ (test/prod) or path to a YAML file (default: CONFIG_ENV or prod)",
    )
    parser.add_argument("--feed-url", default=None, help="Feed URL or local file path")
    parser.add_argument("--country", default=None, help="Country stored on every property")
    parser.add_argument(
        "--max-images",
        type=int,
        default=None,
        help="Maximum images stored per property (default: 10)",
    )

    # Stage toggles
    parser.add_argument("--no-images", action="store_true", help="Skip image download and upload")
    parser.add_argument("--no-translate", action="store_true", help="Store source text for every locale")

    # Output options
    parser.add_argument("--load-rds", action="store_true", help="Upsert properties into Postgres")
    parser.add_argument("--load-local", action="store_true", help="Save properties to a local JSONL file")
    parser.add_argument("--summary-json", default=None, help="Write the run summary as JSON to this path")

    return parser.parse_args(argv)


def apply_cli_overrides(config: ImportConfig, args: argparse.Namespace) -> ImportConfig:
    """Apply command line values on top of the loaded config."""
    if args.feed_url:
        config.fetch.feed_url = args.feed_url
    if args.country:
        config.normalize.country = args.country
    if args.max_images is not None:
        config.normalize.max_images = args.max_images
    if args.no_images:
        config.images.enabled = False
    if args.no_translate:
        config.translation.enabled = False
    return config

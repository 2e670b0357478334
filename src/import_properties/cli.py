"""CLI for importing properties from an XML feed."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.aws import get_s3_client
from common.cli_helpers import save_json_local, setup_logging
from common.db import create_db_engine, make_session_factory
from import_properties.config import ImportConfig, load_config
from import_properties.errors import FeedImportError
from import_properties.helpers import apply_cli_overrides, parse_import_properties_args
from import_properties.import_properties import run_import
from import_properties.load_properties.load import LocalPropertyStore, PropertyUpserter
from import_properties.localize_properties.localize import Localizer, build_openai_client
from import_properties.localize_properties.rate_limiter import RateLimiter
from import_properties.models import RunSummary
from import_properties.resolve_images.resolve_images import ImageResolver

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def build_image_resolver(config: ImportConfig) -> ImageResolver | None:
    if not config.images.enabled:
        logger.info("Image upload disabled")
        return None
    s3 = get_s3_client(config.images.endpoint_url, config.images.region_name)
    return ImageResolver(s3, config.images)


def build_localizer(config: ImportConfig) -> Localizer:
    translation = config.translation
    if not translation.enabled:
        logger.info("Translations disabled, storing source text for every locale")
        return Localizer(None, translation)

    rate_limiter = RateLimiter(
        requests_per_second=translation.requests_per_second,
        max_concurrent=translation.max_concurrent_requests,
    )
    return Localizer(build_openai_client(translation), translation, rate_limiter)


def main(argv: list[str] | None = None) -> int:
    args = parse_import_properties_args(argv)

    config = apply_cli_overrides(load_config(args.config), args)

    if args.load_rds and args.load_local:
        logger.warning("--load-local is ignored when --load-rds is set")

    if args.load_rds:
        engine = create_db_engine(config.database.url, echo=config.database.echo)
        store = PropertyUpserter(make_session_factory(engine))
    else:
        store = LocalPropertyStore()

    try:
        summary = run_import(config, build_image_resolver(config), build_localizer(config), store)
    except FeedImportError as e:
        logger.error("Import aborted: %s", e)
        if args.summary_json:
            save_json_local(RunSummary(error=str(e)).to_report(), args.summary_json)
        return 1

    if args.load_local and not args.load_rds:
        store.save(config.output_dir)

    if args.summary_json:
        path = save_json_local(summary.to_report(), args.summary_json)
        logger.info("Saved run summary to %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())

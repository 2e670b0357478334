"""Configuration loader for import_properties."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from common.config import env_int, env_list, find_config_path, load_yaml

load_dotenv()

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"

DEFAULT_TARGET_LOCALES = ["en", "sv", "nb", "da", "fi"]


@dataclass
class FetchConfig:
    feed_url: str = "./sample-properties.xml"
    timeout: int = 30
    max_retries: int = 2
    backoff_seconds: float = 1.5
    user_agent: str = "property-import/1.0 (feed reader)"


@dataclass
class NormalizeConfig:
    country: str = "Spain"
    max_images: int = 10
    strip_html: bool = False


@dataclass
class ImageConfig:
    enabled: bool = True
    bucket: str = "property-images"
    key_prefix: str = "kyero"
    endpoint_url: str | None = None
    region_name: str | None = None
    public_base_url: str | None = None
    timeout: int = 15
    max_workers: int = 3


@dataclass
class TranslationConfig:
    enabled: bool = True
    model: str = "gpt-3.5-turbo"
    target_locales: list[str] = field(default_factory=lambda: list(DEFAULT_TARGET_LOCALES))
    timeout: float = 60.0
    max_retries: int = 2
    max_workers: int = 4
    max_concurrent_requests: int = 4
    requests_per_second: float = 2.0
    detect_char_limit: int = 500
    max_tokens: int = 500


@dataclass
class DatabaseConfig:
    url: str | None = None
    echo: bool = False


@dataclass
class ImportConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    images: ImageConfig = field(default_factory=ImageConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    output_dir: str = "output"


def load_config(config_name: str | None = None) -> ImportConfig:
    """Load configuration from a YAML file, then apply environment overrides.

    Args:
        config_name: Name of config file in configs/ (without .yaml) or a
            path to a YAML file. If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded ImportConfig object
    """
    config_path = find_config_path(config_name, CONFIG_DIR, env_var="CONFIG_ENV")
    config = parse_config(load_yaml(config_path))
    apply_env_overrides(config)
    return config


def parse_config(data: dict) -> ImportConfig:
    """Parse config dictionary into ImportConfig object."""
    fetch = data.get("fetch", {})
    normalize = data.get("normalize", {})
    images = data.get("images", {})
    translation = data.get("translation", {})
    database = data.get("database", {})

    return ImportConfig(
        fetch=FetchConfig(
            feed_url=fetch.get("feed_url", FetchConfig.feed_url),
            timeout=fetch.get("timeout", 30),
            max_retries=fetch.get("max_retries", 2),
            backoff_seconds=fetch.get("backoff_seconds", 1.5),
            user_agent=fetch.get("user_agent", FetchConfig.user_agent),
        ),
        normalize=NormalizeConfig(
            country=normalize.get("country", "Spain"),
            max_images=normalize.get("max_images", 10),
            strip_html=normalize.get("strip_html", False),
        ),
        images=ImageConfig(
            enabled=images.get("enabled", True),
            bucket=images.get("bucket", "property-images"),
            key_prefix=images.get("key_prefix", "kyero"),
            endpoint_url=images.get("endpoint_url"),
            region_name=images.get("region_name"),
            public_base_url=images.get("public_base_url"),
            timeout=images.get("timeout", 15),
            max_workers=images.get("max_workers", 3),
        ),
        translation=TranslationConfig(
            enabled=translation.get("enabled", True),
            model=translation.get("model", "gpt-3.5-turbo"),
            target_locales=list(translation.get("target_locales", DEFAULT_TARGET_LOCALES)),
            timeout=translation.get("timeout", 60.0),
            max_retries=translation.get("max_retries", 2),
            max_workers=translation.get("max_workers", 4),
            max_concurrent_requests=translation.get("max_concurrent_requests", 4),
            requests_per_second=translation.get("requests_per_second", 2.0),
            detect_char_limit=translation.get("detect_char_limit", 500),
            max_tokens=translation.get("max_tokens", 500),
        ),
        database=DatabaseConfig(
            url=database.get("url"),
            echo=database.get("echo", False),
        ),
        output_dir=data.get("output_dir", "output"),
    )


def apply_env_overrides(config: ImportConfig) -> ImportConfig:
    """Override config values with environment variables when they are set."""
    config.fetch.feed_url = (
        os.getenv("FEED_URL") or os.getenv("KYERO_FEED_URL") or config.fetch.feed_url
    )
    config.normalize.max_images = env_int("MAX_IMAGES_PER_PROPERTY", config.normalize.max_images)
    config.images.bucket = os.getenv("S3_BUCKET_NAME") or config.images.bucket
    config.images.endpoint_url = os.getenv("S3_ENDPOINT_URL") or config.images.endpoint_url
    config.images.region_name = os.getenv("AWS_REGION") or config.images.region_name
    config.images.public_base_url = os.getenv("S3_PUBLIC_BASE_URL") or config.images.public_base_url
    config.translation.model = os.getenv("OPENAI_MODEL") or config.translation.model
    config.translation.target_locales = env_list("TARGET_LOCALES", config.translation.target_locales)
    config.database.url = os.getenv("DATABASE_URL") or config.database.url
    return config

"""Feed retrieval from HTTP(S) URLs or local files."""

import logging
import random
import time
from pathlib import Path

import requests

from import_properties.config import FetchConfig
from import_properties.errors import FeedUnavailable

logger = logging.getLogger(__name__)


def fetch_feed(url: str, config: FetchConfig) -> bytes:
    """
    Fetch raw feed bytes.

    HTTP(S) URLs are downloaded with redirects followed; anything else is read
    as a local file path.

    Raises:
        FeedUnavailable: on a non-successful status, timeout, connection error
            or unreadable file.
    """
    if url.startswith(("http://", "https://")):
        return _fetch_http(url, config)
    return _read_file(url)


def _read_file(location: str) -> bytes:
    path = Path(location.removeprefix("file://"))
    logger.info("Reading feed from file: %s", path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise FeedUnavailable(f"Could not read feed file {path}: {e}") from e

    logger.info("Feed loaded (%d bytes)", len(content))
    return content


def _fetch_http(url: str, config: FetchConfig) -> bytes:
    logger.info("Fetching feed from %s", url)
    attempt = 0
    while True:
        try:
            response = requests.get(
                url,
                timeout=config.timeout,
                allow_redirects=True,
                headers={"User-Agent": config.user_agent},
            )
        except requests.RequestException as e:
            if attempt < config.max_retries:
                attempt += 1
                _backoff(attempt, config, str(e))
                continue
            raise FeedUnavailable(f"Could not fetch feed {url}: {e}") from e

        if _should_retry(response.status_code) and attempt < config.max_retries:
            attempt += 1
            _backoff(attempt, config, f"HTTP {response.status_code}")
            continue

        if not response.ok:
            raise FeedUnavailable(
                f"Could not fetch feed {url}: {response.status_code} {response.reason}"
            )

        logger.info("Feed fetched (%d bytes)", len(response.content))
        return response.content


def _should_retry(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def _backoff(attempt: int, config: FetchConfig, reason: str) -> None:
    delay = config.backoff_seconds ** attempt + random.uniform(0.0, 0.5)
    logger.warning(
        "Feed fetch failed (%s), retry %d/%d in %.1fs",
        reason,
        attempt,
        config.max_retries,
        delay,
    )
    time.sleep(delay)

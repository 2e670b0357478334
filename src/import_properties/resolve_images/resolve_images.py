"""Download feed images and store them under URL-derived keys."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import requests
from botocore.exceptions import BotoCoreError, ClientError

from common.aws import build_object_key, build_public_url, upload_bytes_to_s3
from common.hashing import generate_storage_key
from import_properties.config import ImageConfig
from import_properties.models import MediaAsset

logger = logging.getLogger(__name__)

USER_AGENT = "property-import/1.0 (image fetch)"


class ImageResolver:
    """
    Copies remote images into the object store.

    Each image is stored at ``{key_prefix}/{reference}/{md5(url)}{ext}``.
    The key depends only on the source URL, so re-importing a property
    overwrites the same objects instead of adding new ones.
    """

    def __init__(self, s3_client: Any, config: ImageConfig) -> None:
        self._s3 = s3_client
        self._config = config

    def resolve(self, url: str, reference: str) -> Optional[MediaAsset]:
        """Download one image and upload it. Returns None on any failure."""
        storage_key = generate_storage_key(url)
        object_key = build_object_key(self._config.key_prefix, reference, storage_key)

        content = self._download(url)
        if content is None:
            return None

        try:
            upload_bytes_to_s3(self._s3, content, self._config.bucket, object_key)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Failed to upload image %s to %s: %s", url, object_key, e)
            return None

        return MediaAsset(
            source_url=url,
            storage_key=storage_key,
            object_key=object_key,
            public_url=build_public_url(
                self._config.bucket,
                object_key,
                public_base_url=self._config.public_base_url,
                region_name=self._config.region_name,
            ),
        )

    def resolve_all(self, urls: list[str], reference: str) -> list[MediaAsset]:
        """
        Resolve images on a bounded worker pool.

        Results keep feed order; failed images are left out.
        """
        if not urls:
            return []

        workers = max(1, min(self._config.max_workers, len(urls)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda url: self.resolve(url, reference), urls))

        assets = [asset for asset in results if asset is not None]
        logger.info("Stored %d/%d images for %s", len(assets), len(urls), reference)
        return assets

    def _download(self, url: str) -> Optional[bytes]:
        try:
            response = requests.get(
                url,
                timeout=self._config.timeout,
                allow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Failed to download image %s: %s", url, e)
            return None

        logger.debug("Downloaded %s (%d bytes)", url, len(response.content))
        return response.content

"""Common CLI helper utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

NOISY_LOGGERS = ("urllib3", "botocore", "boto3", "s3transfer", "httpx", "openai")


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    # Reduce noise from dependencies
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def save_json_local(payload: dict[str, Any], path: str | Path) -> Path:
    """Write a single JSON document to a local file.

    Args:
        payload: JSON-serializable mapping.
        path: Destination file. Parent directories are created.

    Returns:
        Path to the created file.
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(
        json.dumps(payload, default=str, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return filepath

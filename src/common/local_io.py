"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from dataclasses import is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_jsonl_records_local(
    records: Iterable[Any],
    prefix: str,
    output_dir: str = "output",
) -> Path:
    """
    Save records to a timestamped local JSONL file.

    Dataclass records are serialized first; dicts are written as they are.

    Args:
        records: Dataclass objects or dicts to save
        prefix: Filename prefix (e.g., "imported_properties")
        output_dir: Directory to save to (default: "output")

    Returns:
        Path to the created file.
    """
    now = datetime.now(timezone.utc)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filename = f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    filepath = output_path / filename

    count = 0
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            serialized = serialize_dataclass(record) if is_dataclass(record) else record
            f.write(json.dumps(serialized, default=str, ensure_ascii=False) + "\n")
            count += 1

    logger.info("Saved %d records to %s", count, filepath)
    return filepath

"""Upsert normalized properties into the property store."""

import logging
from typing import Any, Callable

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.db import session_scope
from common.local_io import save_jsonl_records_local
from common.models import LOCALE_COLUMN_PREFIXES, TITLE_MAX_LENGTH, Property
from import_properties.errors import PersistError
from import_properties.models import NormalizedProperty

logger = logging.getLogger(__name__)

PUBLISHED = "published"

# Columns left untouched when an existing row is updated
IMMUTABLE_COLUMNS = {"id", "reference", "created_at"}


def build_property_row(prop: NormalizedProperty) -> dict[str, Any]:
    """
    Flatten a property into a `properties` row.

    Every title, translated ones included, is truncated to the column length.
    """
    row: dict[str, Any] = {
        "reference": prop.reference,
        "title": _truncate_title(prop.title),
        "description": prop.description,
        "country": prop.country,
        "city": prop.city,
        "price": prop.price,
        "property_type": prop.property_type,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "area": prop.area,
        "plot_area": prop.plot_area,
        "terrace": prop.terrace,
        "ibi_fees": prop.ibi_fees,
        "community_fees": prop.community_fees,
        "basura_tax": prop.basura_tax,
        "images": list(prop.images),
        "source_language": prop.source_locale,
        "translation_status": {
            locale: variant.status for locale, variant in prop.locales.items()
        },
        "status": PUBLISHED,
    }

    for locale, prefix in LOCALE_COLUMN_PREFIXES.items():
        variant = prop.locales.get(locale)
        if variant is None:
            continue
        row[f"{prefix}_title"] = _truncate_title(variant.title)
        row[f"{prefix}_description"] = variant.description

    return row


def _truncate_title(title: str | None) -> str | None:
    return title[:TITLE_MAX_LENGTH] if title else title


class PropertyUpserter:
    """Writes properties to Postgres keyed by their feed reference."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def upsert(self, prop: NormalizedProperty) -> None:
        """
        Insert the property, or replace the fields of the row with the same reference.

        Raises:
            PersistError: if the database rejects the write.
        """
        row = build_property_row(prop)
        stmt = insert(Property).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=["reference"],
            set_={
                **{key: stmt.excluded[key] for key in row if key not in IMMUTABLE_COLUMNS},
                "updated_at": func.now(),
            },
        )

        try:
            with session_scope(self._session_factory) as session:
                session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistError(prop.reference, str(e)) from e

        logger.debug("Upserted property %s", prop.reference)


class LocalPropertyStore:
    """
    In-memory property store keyed by reference, saved as JSONL on demand.

    Used for dry runs without a database; upserting the same reference twice
    keeps one row.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}

    def upsert(self, prop: NormalizedProperty) -> None:
        self.rows[prop.reference] = build_property_row(prop)

    def save(self, output_dir: str = "output") -> None:
        save_jsonl_records_local(self.rows.values(), "imported_properties", output_dir)

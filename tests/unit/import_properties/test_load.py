"""Tests for import_properties.load_properties.load module."""

import json
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from import_properties.errors import PersistError
from import_properties.load_properties.load import (
    LocalPropertyStore,
    PropertyUpserter,
    build_property_row,
)
from import_properties.models import LocaleVariant, NormalizedProperty


def _property(**kwargs) -> NormalizedProperty:
    defaults = {
        "reference": "KY-1001",
        "title": "Villa with sea views",
        "description": "Large villa",
        "property_type": "villa",
        "price": 590000,
        "country": "Spain",
        "city": "Javea",
        "bedrooms": 4,
        "images": ["https://cdn.example.com/kyero/KY-1001/abc.jpg"],
        "source_locale": "en",
        "locales": {
            "en": LocaleVariant("en", "Villa with sea views", "Large villa", "source"),
            "sv": LocaleVariant("sv", "Villa med havsutsikt", "Stor villa", "translated"),
            "fi": LocaleVariant("fi", "Villa with sea views", "Large villa", "fallback"),
        },
    }
    defaults.update(kwargs)
    return NormalizedProperty(**defaults)


class TestBuildPropertyRow:
    def test_locale_columns_and_status(self) -> None:
        row = build_property_row(_property())

        assert row["reference"] == "KY-1001"
        assert row["status"] == "published"
        assert row["english_title"] == "Villa with sea views"
        assert row["swedish_title"] == "Villa med havsutsikt"
        assert row["swedish_description"] == "Stor villa"
        assert row["finnish_description"] == "Large villa"
        assert "danish_title" not in row
        assert row["source_language"] == "en"
        assert row["translation_status"] == {
            "en": "source",
            "sv": "translated",
            "fi": "fallback",
        }
        assert row["images"] == ["https://cdn.example.com/kyero/KY-1001/abc.jpg"]

    def test_titles_truncated(self) -> None:
        long_title = "x" * 300
        prop = _property(
            title=long_title,
            locales={"sv": LocaleVariant("sv", long_title, "desc", "translated")},
        )

        row = build_property_row(prop)

        assert len(row["title"]) == 255
        assert len(row["swedish_title"]) == 255


class TestPropertyUpserter:
    def test_upsert_on_reference(self) -> None:
        session = MagicMock()
        upserter = PropertyUpserter(Mock(return_value=session))

        upserter.upsert(_property())

        session.execute.assert_called_once()
        stmt = session.execute.call_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "INSERT INTO properties" in sql
        assert "ON CONFLICT (reference) DO UPDATE" in sql
        assert "title = excluded.title" in sql
        assert "reference = excluded.reference" not in sql
        assert "updated_at = now()" in sql
        session.commit.assert_called_once()
        session.close.assert_called_once()

    def test_database_error_raises_persist_error(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))
        upserter = PropertyUpserter(Mock(return_value=session))

        with pytest.raises(PersistError) as exc_info:
            upserter.upsert(_property())

        assert exc_info.value.reference == "KY-1001"
        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        session.close.assert_called_once()


class TestLocalPropertyStore:
    def test_same_reference_keeps_one_row(self) -> None:
        store = LocalPropertyStore()

        store.upsert(_property(price=100))
        store.upsert(_property(price=200))

        assert list(store.rows) == ["KY-1001"]
        assert store.rows["KY-1001"]["price"] == 200

    def test_save_writes_jsonl(self, tmp_path: Path) -> None:
        store = LocalPropertyStore()
        store.upsert(_property())
        store.upsert(_property(reference="KY-1002"))

        store.save(str(tmp_path))

        files = list(tmp_path.glob("imported_properties_*.jsonl"))
        assert len(files) == 1
        lines = files[0].read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["reference"] for line in lines] == ["KY-1001", "KY-1002"]

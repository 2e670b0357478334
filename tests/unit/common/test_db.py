"""Tests for common.db module."""

from unittest.mock import MagicMock, Mock

import pytest

from common.db import create_db_engine, normalize_postgres_url, resolve_database_url, session_scope


class TestDatabaseUrl:
    def test_postgres_scheme_normalized(self) -> None:
        assert normalize_postgres_url("postgres://u:p@host/db") == "postgresql+psycopg2://u:p@host/db"

    def test_postgresql_scheme_normalized(self) -> None:
        assert normalize_postgres_url("postgresql://u:p@host/db") == "postgresql+psycopg2://u:p@host/db"

    def test_env_fallback(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@host/db")
        assert resolve_database_url() == "postgresql+psycopg2://u:p@host/db"

    def test_missing_url(self, monkeypatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError):
            resolve_database_url()

    def test_non_postgres_rejected(self) -> None:
        with pytest.raises(RuntimeError):
            create_db_engine("sqlite:///properties.db")


class TestSessionScope:
    def test_commits_and_closes(self) -> None:
        session = MagicMock()
        with session_scope(Mock(return_value=session)) as s:
            s.execute("SELECT 1")

        session.commit.assert_called_once()
        session.rollback.assert_not_called()
        session.close.assert_called_once()

    def test_rolls_back_and_reraises(self) -> None:
        session = MagicMock()
        with pytest.raises(ValueError):
            with session_scope(Mock(return_value=session)):
                raise ValueError("bad row")

        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        session.close.assert_called_once()

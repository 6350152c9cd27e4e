"""Tests for migrations/env_helpers.py and the migration chain."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Make migrations importable without alembic context
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from migrations.env_helpers import _get_database_url, _libpq_dsn_to_url  # noqa: E402

_MIGRATIONS = Path(__file__).resolve().parent.parent / "migrations"


class TestLibpqDsnToUrl:
    def test_unix_socket(self):
        dsn = "dbname=roombook user=svc password=s3cret host=/cloudsql/proj:us-central1:inst"
        assert _libpq_dsn_to_url(dsn) == (
            "postgresql+psycopg2://svc:s3cret@/roombook"
            "?host=%2Fcloudsql%2Fproj%3Aus-central1%3Ainst"
        )

    def test_tcp_host(self):
        dsn = "dbname=roombook user=admin password=pw host=localhost port=5432"
        assert _libpq_dsn_to_url(dsn) == "postgresql+psycopg2://admin:pw@localhost:5432/roombook"

    def test_default_port(self):
        dsn = "dbname=db user=u password=p host=myhost"
        assert _libpq_dsn_to_url(dsn) == "postgresql+psycopg2://u:p@myhost:5432/db"

    def test_special_chars_encoded(self):
        dsn = "dbname=db user=u@domain password=p@ss=word host=h port=5432"
        result = _libpq_dsn_to_url(dsn)
        assert "u%40domain" in result
        assert "p%40ss%3Dword" in result

    def test_quoted_password_with_spaces(self):
        dsn = "dbname=db user=u password='p@ss w0rd' host=h port=5432"
        assert "p%40ss+w0rd" in _libpq_dsn_to_url(dsn)

    def test_db_password_env_fallback(self, monkeypatch):
        monkeypatch.setenv("DB_PASSWORD", "from-env")
        assert "from-env" in _libpq_dsn_to_url("dbname=db user=u host=h port=5432")

    def test_db_password_env_not_used_when_dsn_has_password(self, monkeypatch):
        monkeypatch.setenv("DB_PASSWORD", "from-env")
        result = _libpq_dsn_to_url("dbname=db user=u password=from-dsn host=h port=5432")
        assert "from-dsn" in result
        assert "from-env" not in result


class TestGetDatabaseUrl:
    def test_url_passthrough(self):
        with patch.dict(os.environ, {"DATABASE_URL": "postgresql+psycopg2://u:p@h/db"}, clear=True):
            assert _get_database_url() == "postgresql+psycopg2://u:p@h/db"

    def test_missing_raises(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError, match="DATABASE_URL is required"):
                _get_database_url()

    @pytest.mark.parametrize("url", ["postgres://u:p@h/db", "postgresql://u:p@h/db"])
    def test_scheme_gets_driver(self, url):
        with patch.dict(os.environ, {"DATABASE_URL": url}, clear=True):
            assert _get_database_url() == "postgresql+psycopg2://u:p@h/db"

    def test_url_db_password_fallback(self):
        env = {"DATABASE_URL": "postgresql://u@h:5433/db", "DB_PASSWORD": "secret"}
        with patch.dict(os.environ, env, clear=True):
            assert _get_database_url() == "postgresql+psycopg2://u:secret@h:5433/db"

    def test_dsn_converted(self):
        with patch.dict(os.environ, {"DATABASE_URL": "dbname=db user=u password=p host=h"}, clear=True):
            assert _get_database_url().startswith("postgresql+psycopg2://")


class TestMigrationFiles:
    def test_revision_chain(self):
        versions = sorted(p.name for p in (_MIGRATIONS / "versions").glob("*.py"))
        assert versions == ["001_initial_schema.py", "002_no_room_overlap_constraint.py"]

    def test_overlap_constraint_is_half_open(self):
        sql = (_MIGRATIONS / "sql" / "002_no_room_overlap_constraint.sql").read_text()
        assert "EXCLUDE USING gist" in sql
        assert "daterange(check_in, check_out, '[)') WITH &&" in sql

    def test_schema_checks_date_order_and_version(self):
        sql = (_MIGRATIONS / "sql" / "001_initial_schema.sql").read_text()
        assert "CHECK (check_in < check_out)" in sql
        assert "version    integer NOT NULL DEFAULT 0" in sql

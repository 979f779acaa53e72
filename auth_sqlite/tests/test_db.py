import sqlite3

import pytest

from auth_sqlite.db import Database, get_env_connection_string, parse_connection_string


class TestConnectionString:
    def test_parse_forms(self):
        assert parse_connection_string("sqlite:///data/auth.db") == ("data/auth.db", False)
        assert parse_connection_string("sqlite:////abs/auth.db") == ("/abs/auth.db", False)
        assert parse_connection_string("file:auth.db?mode=ro") == ("file:auth.db?mode=ro", True)
        assert parse_connection_string(" auth.db ") == ("auth.db", False)

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported connection string"):
            parse_connection_string("postgres://localhost/db")

    def test_env_wins_over_config(self, monkeypatch, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("database_url: sqlite:///from_config.db\n", encoding="utf-8")
        monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(cfg))
        monkeypatch.setenv("AUTH_SQLITE_URL", "sqlite:///from_env.db")
        assert get_env_connection_string() == "sqlite:///from_env.db"

    def test_config_test_url_under_pytest(self, monkeypatch, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            "database_url: sqlite:///prod.db\ntest_database_url: sqlite:///test.db\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(cfg))
        assert get_env_connection_string() == "sqlite:///test.db"

    def test_config_database_url_outside_tests(self, monkeypatch, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            "database_url: sqlite:///prod.db\ntest_database_url: sqlite:///test.db\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(cfg))
        monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
        monkeypatch.delenv("APP_ENV", raising=False)
        assert get_env_connection_string() == "sqlite:///prod.db"

    def test_malformed_config_is_ignored(self, monkeypatch, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("database_url: [unclosed\n", encoding="utf-8")
        monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(cfg))
        assert get_env_connection_string() is None

    def test_non_mapping_config_is_ignored(self, monkeypatch, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("- sqlite:///a.db\n- sqlite:///b.db\n", encoding="utf-8")
        monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(cfg))
        assert get_env_connection_string() is None

    def test_nothing_configured(self):
        assert get_env_connection_string() is None


class TestDatabase:
    async def test_sql_returns_rows_and_lastrowid(self, tmp_db_path):
        db = Database(tmp_db_path)
        await db.sql("CREATE TABLE t (name TEXT)")
        res = await db.sql("INSERT INTO t(name) VALUES(?)", ("a",))
        assert res.lastrowid == 1
        assert res.rows == []
        res = await db.sql("SELECT rowid AS id, name FROM t")
        assert res.rows == [{"id": 1, "name": "a"}]
        assert res.first() == {"id": 1, "name": "a"}

    async def test_first_on_empty(self, tmp_db_path):
        db = Database(tmp_db_path)
        await db.sql("CREATE TABLE t (name TEXT)")
        assert (await db.sql("SELECT * FROM t")).first() is None

    async def test_transaction_commits(self, tmp_db_path):
        db = Database(tmp_db_path)
        await db.sql("CREATE TABLE t (name TEXT)")
        async with db.transaction() as tx:
            await tx.sql("INSERT INTO t(name) VALUES(?)", ("a",))
            await tx.sql("INSERT INTO t(name) VALUES(?)", ("b",))
        assert len((await db.sql("SELECT * FROM t")).rows) == 2

    async def test_transaction_rolls_back_on_error(self, tmp_db_path):
        db = Database(tmp_db_path)
        await db.sql("CREATE TABLE t (name TEXT UNIQUE)")
        with pytest.raises(sqlite3.IntegrityError):
            async with db.transaction() as tx:
                await tx.sql("INSERT INTO t(name) VALUES(?)", ("a",))
                await tx.sql("INSERT INTO t(name) VALUES(?)", ("a",))
        assert (await db.sql("SELECT * FROM t")).rows == []

    async def test_foreign_keys_enforced(self, tmp_db_path):
        db = Database(tmp_db_path)
        await db.sql("CREATE TABLE p (id TEXT PRIMARY KEY)")
        await db.sql("CREATE TABLE c (pid TEXT REFERENCES p(id))")
        with pytest.raises(sqlite3.IntegrityError):
            await db.sql("INSERT INTO c(pid) VALUES(?)", ("missing",))

    def test_from_url_creates_parent_dir(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "auth.db"
        db = Database.from_url(f"sqlite:///{target}")
        assert db.database == str(target)
        assert target.parent.is_dir()

"""Unit tests for database migrator."""

from pathlib import Path

import aiosqlite
import pytest

from gasstock.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("-- Test migration\nSELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert len(info.checksum) == 16

    def test_invalid_filename(self, tmp_path: Path):
        bad = tmp_path / "initial.sql"
        bad.write_text("SELECT 1;")
        with pytest.raises(ValueError):
            MigrationInfo.from_file(bad)


class TestDiscoverMigrations:
    def test_packaged_migrations_in_order(self):
        migrations = discover_migrations()
        assert migrations[0].version == "001"
        versions = [m.version for m in migrations]
        assert versions == sorted(versions)

    def test_skips_invalid_names(self, tmp_path: Path):
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "vbad.sql").write_text("SELECT 3;")
        assert [m.name for m in discover_migrations(tmp_path)] == ["first", "second"]


class TestInitializeDatabase:
    async def test_creates_schema(self, tmp_path: Path):
        db_path = tmp_path / "fresh.db"
        results = await initialize_database(db_path)

        assert results and all(r.success for r in results)
        checks = await verify_schema_integrity(db_path)
        assert all(check["status"] == "PASS" for check in checks)

    async def test_is_idempotent(self, tmp_path: Path):
        db_path = tmp_path / "twice.db"
        await initialize_database(db_path)
        assert await initialize_database(db_path) == []

    async def test_records_applied_versions(self, tmp_path: Path):
        db_path = tmp_path / "versions.db"
        await initialize_database(db_path)
        async with aiosqlite.connect(db_path) as conn:
            applied = await get_applied_migrations(conn)
        assert "001" in applied

    async def test_status(self, tmp_path: Path):
        db_path = tmp_path / "status.db"
        before = await get_migration_status(db_path)
        assert before["exists"] is False
        assert "001" in before["pending_migrations"]

        await initialize_database(db_path)
        after = await get_migration_status(db_path)
        assert after["current_version"] is not None
        assert after["pending_migrations"] == []

    async def test_required_tables(self, db_path: Path):
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= tables


class TestBackup:
    def test_backup_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "data.db"
        db_path.write_bytes(b"original")

        backup = create_backup(db_path)
        db_path.write_bytes(b"changed")
        restore_backup(db_path, backup)

        assert db_path.read_bytes() == b"original"

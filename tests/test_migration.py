from pathlib import Path

import pytest

from movies_api.db.manager import discover_migrations
from movies_api.db.migration import DOWN, UP, AbstractMigration
from movies_api.db.schema import CreateTableOp, DropTableOp, ExecuteOp
from movies_api.domain.exceptions import InvalidMigrationError, IrreversibleMigrationError

SHIPPED = Path(__file__).resolve().parents[1] / "movies_api" / "db" / "migrations"


def shipped_movies_migration():
    [mf] = [m for m in discover_migrations(SHIPPED) if m.class_name == "CreateMoviesTable"]
    return mf.load()


def test_shipped_migration_creates_movies_with_four_text_columns():
    migration = shipped_movies_migration()

    [op] = migration.plan(UP)

    assert isinstance(op, CreateTableOp)
    assert op.table == "movies"
    assert [(c.name, c.type) for c in op.columns] == [
        ("name", "text"),
        ("year", "text"),
        ("director", "text"),
        ("summary", "text"),
    ]


def test_change_is_reverted_automatically():
    migration = shipped_movies_migration()
    assert migration.plan(DOWN) == [DropTableOp("movies")]


def test_plan_can_be_called_repeatedly():
    migration = shipped_movies_migration()
    assert len(migration.plan(UP)) == 1
    assert len(migration.plan(UP)) == 1


class SeedMovies(AbstractMigration):
    def up(self):
        self.execute("INSERT INTO movies (name) VALUES ('Alien')")

    def down(self):
        self.execute("DELETE FROM movies WHERE name = 'Alien'")


class UpOnly(AbstractMigration):
    def up(self):
        self.execute("UPDATE movies SET year = '1979'")


class DropsInChange(AbstractMigration):
    def change(self):
        self.table("old_movies").drop()


class Empty(AbstractMigration):
    pass


def test_up_and_down():
    migration = SeedMovies(20240101000000)
    assert migration.plan(UP) == [ExecuteOp("INSERT INTO movies (name) VALUES ('Alien')")]
    assert migration.plan(DOWN) == [ExecuteOp("DELETE FROM movies WHERE name = 'Alien'")]
    assert migration.is_reversible


def test_missing_down_is_irreversible():
    migration = UpOnly(20240101000001)
    assert not migration.is_reversible
    with pytest.raises(IrreversibleMigrationError):
        migration.plan(DOWN)


def test_irreversible_operation_in_change_reports_version():
    migration = DropsInChange(20240101000002)
    assert migration.plan(UP) == [DropTableOp("old_movies")]
    with pytest.raises(IrreversibleMigrationError) as exc_info:
        migration.plan(DOWN)
    assert exc_info.value.version == 20240101000002


def test_migration_without_body_is_invalid():
    with pytest.raises(InvalidMigrationError):
        Empty(20240101000003).plan(UP)

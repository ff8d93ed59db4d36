import pytest

from movies_api.db.migration import AbstractMigration
from movies_api.db.schema import (
    AddColumnOp,
    ColumnSpec,
    CreateTableOp,
    DropTableOp,
    ExecuteOp,
    RemoveColumnOp,
    RenameTableOp,
)
from movies_api.domain.exceptions import InvalidMigrationError, IrreversibleMigrationError


def recorded(build):
    migration = AbstractMigration(1, "Scratch")
    build(migration)
    return migration._operations


def test_movies_table_ddl():
    ops = recorded(lambda m: m.table("movies")
                   .add_column("name", "text")
                   .add_column("year", "text")
                   .add_column("director", "text")
                   .add_column("summary", "text")
                   .create())

    assert len(ops) == 1
    sql = ops[0].statements()[0]
    assert sql.startswith("CREATE TABLE movies")
    assert "id INTEGER NOT NULL AUTO_INCREMENT" in sql
    assert "PRIMARY KEY (id)" in sql
    assert "director TEXT" in sql
    assert "summary TEXT" in sql
    assert sql.count("TEXT") == 4
    assert "ENGINE=InnoDB" in sql


def test_column_options():
    ops = recorded(lambda m: m.table("users", id=False, primary_key="email")
                   .add_column("email", "string", limit=120)
                   .add_column("active", "boolean", null=False, default=True)
                   .create())

    sql = ops[0].statements()[0]
    assert "AUTO_INCREMENT" not in sql
    assert "email VARCHAR(120) NOT NULL" in sql
    assert "DEFAULT '1'" in sql
    assert "PRIMARY KEY (email)" in sql


def test_unknown_column_type_is_rejected():
    with pytest.raises(InvalidMigrationError):
        ColumnSpec("rating", "jsonb")


def test_unknown_column_option_is_rejected():
    with pytest.raises(InvalidMigrationError):
        ColumnSpec("rating", "string", {"lenght": 10})


def test_primary_key_must_be_declared():
    with pytest.raises(InvalidMigrationError):
        recorded(lambda m: m.table("t", id=False, primary_key="code").add_column("name", "text").create())


def test_update_records_column_changes():
    ops = recorded(lambda m: m.table("movies")
                   .remove_column("summary")
                   .add_column("rating", "string", limit=10)
                   .update())

    assert [type(op) for op in ops] == [RemoveColumnOp, AddColumnOp]
    assert ops[0].statements() == ["ALTER TABLE movies DROP COLUMN summary"]
    assert ops[1].statements()[0].startswith("ALTER TABLE movies ADD COLUMN rating VARCHAR(10)")


def test_rename_and_drop():
    ops = recorded(lambda m: m.table("films").rename("movies").drop())

    assert ops[0].statements() == ["RENAME TABLE films TO movies"]
    assert ops[1] == DropTableOp("movies")
    assert ops[1].statements() == ["DROP TABLE movies"]


def test_inverses():
    create = CreateTableOp("movies", [ColumnSpec("name", "text")])
    add = AddColumnOp("movies", ColumnSpec("rating", "string"))
    rename = RenameTableOp("films", "movies")

    assert create.inverse() == DropTableOp("movies")
    assert add.inverse() == RemoveColumnOp("movies", "rating")
    assert rename.inverse() == RenameTableOp("movies", "films")

    for op in (DropTableOp("movies"), RemoveColumnOp("movies", "name"), ExecuteOp("SELECT 1")):
        with pytest.raises(IrreversibleMigrationError):
            op.inverse()

import os

import pytest

from movies_api.shared.config.env import _loaded_files, env, load_env, missing_keys


def write_env(path, content):
    path.write_text(content, encoding="utf-8")
    return path


def test_every_key_is_retrievable_with_its_exact_value(tmp_path):
    dotenv = write_env(tmp_path / ".env", (
        "DATABASE_HOST=db.local\n"
        "DATABASE_NAME=movies\n"
        "DATABASE_USER=slim\n"
        "DATABASE_PASS=s3cr=t with spaces\n"
        "DATABASE_PORT=3307\n"
    ))

    assert load_env(dotenv) is True

    assert env("DATABASE_HOST") == "db.local"
    assert env("DATABASE_NAME") == "movies"
    assert env("DATABASE_USER") == "slim"
    assert env("DATABASE_PASS") == "s3cr=t with spaces"
    assert env("DATABASE_PORT") == "3307"


def test_missing_file_does_not_raise(tmp_path):
    assert load_env(tmp_path / "nope.env") is False
    assert env("DATABASE_HOST") == ""


def test_no_env_file_found_from_cwd():
    assert load_env() is False


def test_finds_env_file_in_cwd(tmp_path):
    write_env(tmp_path / ".env", "DATABASE_NAME=from_cwd\n")

    assert load_env() is True
    assert env("DATABASE_NAME") == "from_cwd"


def test_missing_key_returns_empty_string():
    assert env("DATABASE_USER") == ""
    assert env("DATABASE_USER", "fallback") == "fallback"


def test_existing_variables_win_unless_override(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_HOST", "from-process")
    dotenv = write_env(tmp_path / ".env", "DATABASE_HOST=from-file\n")

    load_env(dotenv)
    assert env("DATABASE_HOST") == "from-process"

    load_env(dotenv, override=True, force=True)
    assert env("DATABASE_HOST") == "from-file"


def test_second_load_is_a_noop_unless_forced(tmp_path):
    dotenv = write_env(tmp_path / ".env", "DATABASE_NAME=first\n")
    load_env(dotenv)

    write_env(dotenv, "DATABASE_NAME=second\n")
    assert load_env(dotenv, override=True) is True
    assert env("DATABASE_NAME") == "first"

    load_env(dotenv, override=True, force=True)
    assert env("DATABASE_NAME") == "second"


def test_missing_keys_lists_empty_database_values(monkeypatch):
    monkeypatch.setenv("DATABASE_HOST", "localhost")
    monkeypatch.setenv("DATABASE_PASS", "")

    missing = missing_keys()

    assert "DATABASE_HOST" not in missing
    assert "DATABASE_PASS" in missing
    assert "DATABASE_PORT" in missing
    assert "DATABASE_HOST" in os.environ


def test_invalid_utf8_file_does_not_raise(tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_bytes(b"DATABASE_HOST=caf\xe9\xff\n")

    assert load_env(dotenv) is False
    assert str(dotenv.resolve()) not in _loaded_files
    assert env("DATABASE_HOST") == ""


def test_directory_path_does_not_raise(tmp_path):
    directory = tmp_path / "config.env"
    directory.mkdir()

    assert load_env(directory) is False
    assert str(directory.resolve()) not in _loaded_files


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="root ignora los permisos de lectura",
)
def test_unreadable_file_does_not_raise(tmp_path):
    dotenv = write_env(tmp_path / ".env", "DATABASE_HOST=db.local\n")
    dotenv.chmod(0)
    try:
        assert load_env(dotenv) is False
        assert str(dotenv.resolve()) not in _loaded_files
    finally:
        dotenv.chmod(0o644)

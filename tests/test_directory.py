"""Tests for directory loading, reloading and sanity checks."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from webfinger_app.directory import (
    Directory,
    DirectoryStore,
    check_directory,
    load_directory,
)
from webfinger_app.errors import DirectoryUnavailable

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config" / "config.example.json"


def _write(path: Path, data: dict, mtime_ns: int | None = None) -> Path:
    path.write_text(json.dumps(data))
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def test_issuers(directory):
    assert directory.global_issuer == "https://example.com/oidc/"
    assert directory.domains["some-domain.com"].issuer is None
    assert directory.domains["other-domain.org"].issuer == "https://sso.other-domain.org/"


def test_absent_sections():
    directory = Directory.model_validate({})
    assert directory.domains is None
    assert directory.users is None
    assert directory.global_issuer is None


def test_user_order_preserved(directory):
    assert list(directory.users) == ["hey", "jane", "bob"]


def test_unknown_keys_ignored():
    directory = Directory.model_validate(
        {"domains": {"a.com": {"theme": "dark"}}, "users": {"x": {"pronouns": "they"}}}
    )
    assert directory.domains["a.com"].issuer is None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def test_load_directory(tmp_path, directory_data):
    directory = load_directory(_write(tmp_path / "config.json", directory_data))
    assert set(directory.domains) == {"some-domain.com", "other-domain.org"}
    assert directory.users["jane"].usernames == [
        "jdoe@other-domain.org",
        "j.doe@some-domain.com",
    ]


def test_load_missing_file(tmp_path):
    with pytest.raises(DirectoryUnavailable) as exc:
        load_directory(tmp_path / "nope.json")
    assert exc.value.status_code == 503
    assert exc.value.to_dict() == {"message": "Configuration unavailable"}


def test_load_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(DirectoryUnavailable):
        load_directory(path)


def test_load_wrong_shape(tmp_path):
    path = _write(tmp_path / "config.json", {"users": {"jane": {"usernames": "jdoe@a.com"}}})
    with pytest.raises(DirectoryUnavailable):
        load_directory(path)


def test_example_config_is_usable():
    directory = load_directory(EXAMPLE_CONFIG)
    assert directory.domains
    assert directory.users
    assert check_directory(directory) == []


# ---------------------------------------------------------------------------
# DirectoryStore
# ---------------------------------------------------------------------------


def test_store_requires_source():
    with pytest.raises(ValueError):
        DirectoryStore()


def test_store_from_directory(directory):
    assert DirectoryStore.from_directory(directory).get() is directory


def test_store_loads_lazily(tmp_path, directory_data):
    path = tmp_path / "config.json"
    store = DirectoryStore(path)
    _write(path, directory_data)
    assert "jane" in store.get().users


def test_store_without_reload_keeps_snapshot(tmp_path, directory_data):
    path = _write(tmp_path / "config.json", directory_data, mtime_ns=1_000_000_000)
    store = DirectoryStore(path)
    first = store.get()

    directory_data["users"] = {"new": {}}
    _write(path, directory_data, mtime_ns=2_000_000_000)
    assert store.get() is first


def test_store_auto_reload(tmp_path, directory_data):
    path = _write(tmp_path / "config.json", directory_data, mtime_ns=1_000_000_000)
    store = DirectoryStore(path, auto_reload=True)
    assert "jane" in store.get().users

    directory_data["users"] = {"new": {}}
    _write(path, directory_data, mtime_ns=2_000_000_000)
    assert list(store.get().users) == ["new"]


def test_store_auto_reload_keeps_previous_on_error(tmp_path, directory_data):
    path = _write(tmp_path / "config.json", directory_data, mtime_ns=1_000_000_000)
    store = DirectoryStore(path, auto_reload=True)
    first = store.get()

    path.write_text("{broken")
    os.utime(path, ns=(2_000_000_000, 2_000_000_000))
    assert store.get() is first


def test_store_explicit_reload_raises(tmp_path, directory_data):
    path = _write(tmp_path / "config.json", directory_data)
    store = DirectoryStore(path)
    store.get()
    path.unlink()
    with pytest.raises(DirectoryUnavailable):
        store.reload()


# ---------------------------------------------------------------------------
# check_directory
# ---------------------------------------------------------------------------


def test_check_clean(directory):
    assert check_directory(directory) == []


def test_check_empty():
    assert check_directory(Directory()) == [
        "no domains are whitelisted",
        "no users are whitelisted",
    ]


def test_check_missing_issuer():
    directory = Directory.model_validate({"domains": {"a.com": {}}, "users": {"x": {}}})
    assert check_directory(directory) == ["domain 'a.com' has no OIDC issuer"]


def test_check_bad_usernames():
    directory = Directory.model_validate(
        {
            "oidc": {"issuer": "https://idp.a.com/"},
            "domains": {"a.com": {}},
            "users": {"x": {"usernames": ["plain", "y@b.com", "z@a.com"]}},
        }
    )
    assert check_directory(directory) == [
        "user 'x': username 'plain' is not user@domain",
        "user 'x': username 'y@b.com' is on a domain that is not whitelisted",
    ]

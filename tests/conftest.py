"""Shared test fixtures."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from webfinger_app.config import AppConfig
from webfinger_app.directory import Directory

GLOBAL_ISSUER = "https://example.com/oidc/"
DOMAIN_ISSUER = "https://sso.other-domain.org/"

DIRECTORY_DATA: dict[str, Any] = {
    "oidc": {"issuer": GLOBAL_ISSUER},
    "domains": {
        "some-domain.com": {},
        "other-domain.org": {"oidc": {"issuer": DOMAIN_ISSUER}},
    },
    "users": {
        "hey": {},
        "jane": {
            "name": "Jane Doe",
            "email": "jane@some-domain.com",
            "website": "https://jane.some-domain.com",
            "image": "https://jane.some-domain.com/avatar.jpg",
            "usernames": ["jdoe@other-domain.org", "j.doe@some-domain.com"],
        },
        "bob": {
            "email": "bob@some-domain.com",
            "usernames": ["j.doe@some-domain.com"],
        },
    },
}


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(dev_hosts=["localhost"], config_path="config/config.json")


@pytest.fixture
def directory() -> Directory:
    return Directory.model_validate(DIRECTORY_DATA)


@pytest.fixture
def directory_data() -> dict[str, Any]:
    return copy.deepcopy(DIRECTORY_DATA)

"""The whitelist of domains and users, and how it is loaded from disk.

The directory is a JSON document maintained by the operator::

    {
        "oidc": {"issuer": "https://auth.example.com/"},
        "domains": {
            "example.com": {},
            "example.org": {"oidc": {"issuer": "https://auth.example.org/"}}
        },
        "users": {
            "jane": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "website": "https://jane.example.com",
                "image": "https://jane.example.com/avatar.jpg",
                "usernames": ["jdoe@example.org"]
            }
        }
    }

Keys are matched exactly (no case folding). Mapping order follows the file,
which makes the ``usernames`` fallback scan deterministic.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from webfinger_app.errors import DirectoryUnavailable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class OidcSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    issuer: str | None = None


class DomainOverride(BaseModel):
    """Per-domain settings that take precedence over the global ones."""

    model_config = ConfigDict(frozen=True)

    oidc: OidcSettings | None = None

    @property
    def issuer(self) -> str | None:
        return self.oidc.issuer if self.oidc else None


class UserRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None
    website: str | None = None
    image: str | None = None
    # Extra ``user@domain`` identifiers this user answers to
    usernames: list[str] | None = None


class Directory(BaseModel):
    model_config = ConfigDict(frozen=True)

    oidc: OidcSettings | None = None
    domains: dict[str, DomainOverride] | None = None
    users: dict[str, UserRecord] | None = None

    @property
    def global_issuer(self) -> str | None:
        return self.oidc.issuer if self.oidc else None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_directory(path: Path) -> Directory:
    """Read and validate a directory file.

    Raises ``DirectoryUnavailable`` if the file is missing, unreadable or
    does not match the expected shape.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DirectoryUnavailable(f"cannot read {path}: {e}") from e
    try:
        directory = Directory.model_validate_json(text)
    except ValidationError as e:
        raise DirectoryUnavailable(f"invalid directory file {path}: {e}") from e

    logger.info(
        "Loaded directory from %s (%d domains, %d users)",
        path,
        len(directory.domains or {}),
        len(directory.users or {}),
    )
    return directory


class DirectoryStore:
    """Holds the current directory snapshot.

    A store built from a file loads it lazily on first access. With
    ``auto_reload`` the file is re-read whenever its modification time
    changes; a failed reload keeps serving the previous snapshot.
    """

    def __init__(
        self,
        path: Path | None = None,
        auto_reload: bool = False,
        directory: Directory | None = None,
    ) -> None:
        if path is None and directory is None:
            raise ValueError("DirectoryStore needs a path or a directory")
        self.path = Path(path) if path is not None else None
        self.auto_reload = auto_reload
        self._directory = directory
        self._mtime: int | None = None

    @classmethod
    def from_directory(cls, directory: Directory) -> DirectoryStore:
        """A store that always serves *directory*."""
        return cls(directory=directory)

    def _current_mtime(self) -> int:
        try:
            return self.path.stat().st_mtime_ns
        except OSError as e:
            raise DirectoryUnavailable(f"cannot stat {self.path}: {e}") from e

    def reload(self) -> Directory:
        """Re-read the directory file and make it the current snapshot."""
        if self.path is None:
            raise DirectoryUnavailable("store has no directory file")
        mtime = self._current_mtime()
        self._directory = load_directory(self.path)
        self._mtime = mtime
        return self._directory

    def get(self) -> Directory:
        """Return the current snapshot, loading or reloading if needed."""
        if self.path is None:
            return self._directory

        if self._directory is None:
            return self.reload()

        if self.auto_reload:
            try:
                if self._current_mtime() != self._mtime:
                    self.reload()
            except DirectoryUnavailable as e:
                logger.warning("Directory reload failed, keeping previous snapshot: %s", e)
        return self._directory


# ---------------------------------------------------------------------------
# Sanity checks
# ---------------------------------------------------------------------------


def check_directory(directory: Directory) -> list[str]:
    """List configuration mistakes that would make lookups fail."""
    problems: list[str] = []
    domains = directory.domains or {}

    if not domains:
        problems.append("no domains are whitelisted")
    if not directory.users:
        problems.append("no users are whitelisted")

    for domain, override in domains.items():
        if not (override.issuer or directory.global_issuer):
            problems.append(f"domain {domain!r} has no OIDC issuer")

    for key, user in (directory.users or {}).items():
        for username in user.usernames or []:
            local, sep, domain = username.partition("@")
            if not local or not sep or not domain or "@" in domain:
                problems.append(f"user {key!r}: username {username!r} is not user@domain")
            elif domains and domain not in domains:
                problems.append(
                    f"user {key!r}: username {username!r} is on a domain that is not whitelisted"
                )

    return problems

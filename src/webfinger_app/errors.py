"""Request rejections raised while resolving a WebFinger query.

Every gate of the resolver has exactly one exception type here. The HTTP
layer turns them into JSON bodies of the form ``{"message": ...}``.
"""

from __future__ import annotations

from typing import Any


class WebfingerError(Exception):
    """Base class for rejected WebFinger requests."""

    status_code: int = 400
    message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class MissingResource(WebfingerError):
    message = "Missing resource parameter"


class MalformedResource(WebfingerError):
    message = "Resource must be in form acct:email@domain.com"


class NoDomainsWhitelisted(WebfingerError):
    message = "No domains are whitelisted for access"


class DomainNotWhitelisted(WebfingerError):
    message = "Domain is not whitelisted for access"


class DomainMismatch(WebfingerError):
    """The query reached a host other than the account's domain."""

    message = "Must access from corresponding domain"

    def __init__(self, url: str) -> None:
        super().__init__()
        self.url = url  # Where the query should have been sent

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["url"] = self.url
        return d


class NoUsersWhitelisted(WebfingerError):
    message = "No users are whitelisted for access"


class UserNotWhitelisted(WebfingerError):
    message = "User is not whitelisted for access"


class DirectoryUnavailable(WebfingerError):
    """The directory file could not be read or did not validate.

    Raised at the loader boundary, never by the resolver itself.
    """

    status_code = 503
    message = "Configuration unavailable"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__()
        self.detail = detail  # Logged, never sent to clients

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

"""Validation of WebFinger queries against the directory.

``resolve`` runs the gates in a fixed order and raises the first
``WebfingerError`` that applies. Later gates are never evaluated once one
has failed, so the order below is part of the HTTP contract.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from urllib.parse import quote

from webfinger_app.directory import Directory, DomainOverride, UserRecord
from webfinger_app.errors import (
    DomainMismatch,
    DomainNotWhitelisted,
    MalformedResource,
    MissingResource,
    NoDomainsWhitelisted,
    NoUsersWhitelisted,
    UserNotWhitelisted,
)

logger = logging.getLogger(__name__)

ACCT_PREFIX = "acct:"
DEFAULT_DEV_HOSTS = ("localhost",)

# Characters encodeURIComponent leaves alone besides the unreserved set
_URI_COMPONENT_SAFE = "!~*'()"


@dataclass(frozen=True)
class ResolvedIdentity:
    """A query that passed every gate."""

    domain: str
    domain_override: DomainOverride
    user: UserRecord
    username: str  # Directory key of the matched user
    resource: str  # As requested, including ``acct:``


def parse_acct(resource: str) -> tuple[str, str]:
    """Split ``acct:local@domain`` into ``(local, domain)``.

    Only the first ``@`` separates the parts; a domain that still contains
    ``@`` is rejected along with empty parts.
    """
    if not resource.startswith(ACCT_PREFIX):
        raise MalformedResource()
    local, sep, domain = resource[len(ACCT_PREFIX):].partition("@")
    if not local or not sep or not domain or "@" in domain:
        raise MalformedResource()
    return local, domain


def webfinger_url(domain: str, resource: str) -> str:
    """The WebFinger query URL for *resource* on *domain*."""
    encoded = quote(resource, safe=_URI_COMPONENT_SAFE)
    return f"https://{domain}/.well-known/webfinger?resource={encoded}"


def find_user(
    users: dict[str, UserRecord], local: str, account: str
) -> tuple[str, UserRecord] | None:
    """Look *local* up by key, then scan ``usernames`` for *account*.

    The scan follows directory order and returns the first match.
    """
    user = users.get(local)
    if user is not None:
        return local, user
    for key, candidate in users.items():
        if candidate.usernames and account in candidate.usernames:
            return key, candidate
    return None


def resolve(
    resource: str | None,
    request_hostname: str,
    directory: Directory,
    dev_hosts: Collection[str] = DEFAULT_DEV_HOSTS,
) -> ResolvedIdentity:
    """Validate a query and find the whitelisted user it refers to.

    *request_hostname* is the host the query arrived on (without port).
    Hosts in *dev_hosts* may query any whitelisted domain.
    """
    if not resource:
        raise MissingResource()

    local, domain = parse_acct(resource)

    if not directory.domains:
        raise NoDomainsWhitelisted()
    if domain not in directory.domains:
        logger.info("Rejected %s: domain not whitelisted", resource)
        raise DomainNotWhitelisted()

    if request_hostname != domain and request_hostname not in dev_hosts:
        logger.info("Rejected %s: queried on %s", resource, request_hostname)
        raise DomainMismatch(webfinger_url(domain, resource))

    if not directory.users:
        raise NoUsersWhitelisted()

    found = find_user(directory.users, local, f"{local}@{domain}")
    if found is None:
        logger.info("Rejected %s: user not whitelisted", resource)
        raise UserNotWhitelisted()

    username, user = found
    logger.debug("Resolved %s to user %s", resource, username)
    return ResolvedIdentity(
        domain=domain,
        domain_override=directory.domains[domain],
        user=user,
        username=username,
        resource=resource,
    )

"""JSON Resource Descriptor construction."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from webfinger_app.directory import Directory
from webfinger_app.resolver import ResolvedIdentity

REL_AVATAR = "http://webfinger.net/rel/avatar"
REL_PROFILE_PAGE = "http://webfinger.net/rel/profile-page"
REL_OIDC_ISSUER = "http://openid.net/specs/connect/1.0/issuer"
PROP_NAME = "http://packetizer.com/ns/name"


@dataclass(frozen=True)
class Link:
    rel: str
    type: str | None = None
    href: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"rel": self.rel}
        if self.type is not None:
            d["type"] = self.type
        if self.href is not None:
            d["href"] = self.href
        return d


@dataclass(frozen=True)
class Jrd:
    """A WebFinger response document.

    Collections are ``None`` rather than empty when there is nothing to
    report; ``to_dict`` leaves ``None`` members out entirely.
    """

    subject: str
    aliases: list[str] | None = None
    properties: dict[str, str] | None = None
    links: list[Link] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"subject": self.subject}
        if self.aliases is not None:
            d["aliases"] = list(self.aliases)
        if self.properties is not None:
            d["properties"] = dict(self.properties)
        if self.links is not None:
            d["links"] = [link.to_dict() for link in self.links]
        return d


def build_jrd(
    resolved: ResolvedIdentity,
    directory: Directory,
    rel: Iterable[str] | None = None,
) -> Jrd:
    """Describe a resolved account.

    When *rel* is non-empty only links with one of those relations are
    kept. Aliases and properties are never filtered.
    """
    user = resolved.user

    aliases: list[str] = []
    if user.email:
        aliases.append(f"mailto:{user.email}")

    properties: dict[str, str] = {}
    if user.name:
        properties[PROP_NAME] = user.name

    links: list[Link] = []
    if user.image:
        links.append(Link(rel=REL_AVATAR, type="image/jpeg", href=user.image))
    if user.website:
        links.append(Link(rel=REL_PROFILE_PAGE, type="text/html", href=user.website))
    issuer = resolved.domain_override.issuer or directory.global_issuer
    if issuer:
        links.append(Link(rel=REL_OIDC_ISSUER, href=issuer))

    wanted = set(rel or ())
    if wanted:
        links = [link for link in links if link.rel in wanted]

    return Jrd(
        subject=resolved.resource,
        aliases=aliases or None,
        properties=properties or None,
        links=links or None,
    )

"""WebFinger endpoint (RFC 7033) for whitelisted ``acct:`` resources."""

from __future__ import annotations

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from webfinger_app.directory import DirectoryStore
from webfinger_app.jrd import build_jrd
from webfinger_app.resolver import resolve


def _request_hostname(request: Request) -> str:
    """Extract hostname from the Host header, stripping port if present."""
    host = request.headers.get("host", "")
    if host.startswith("["):
        return host[1:].split("]")[0]
    return host.split(":")[0]


async def webfinger_handler(
    request: Request,
    resource: str | None = Query(None),
    rel: list[str] | None = Query(None),
) -> JSONResponse:
    config = request.app.state.config
    store: DirectoryStore = request.app.state.directory_store
    directory = store.get()

    resolved = resolve(
        resource,
        _request_hostname(request),
        directory,
        dev_hosts=config.dev_hosts,
    )
    jrd = build_jrd(resolved, directory, rel)

    return JSONResponse(content=jrd.to_dict(), media_type="application/json")

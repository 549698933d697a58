"""WebFinger discovery of OpenID Connect issuers for whitelisted accounts."""

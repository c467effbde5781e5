"""Guards for the identity contract.

The core never authenticates anyone.  It receives an opaque shopper
identity (and, for admin operations, an admin flag) from the external
auth layer and trusts both as given.
"""

from __future__ import annotations

from storefront.domain.exceptions import NotAuthenticatedError, NotAuthorizedError


def require_identity(user_id: str | None) -> str:
    if user_id is None or not user_id.strip():
        raise NotAuthenticatedError("Authentication required")
    return user_id.strip()


def require_admin(is_admin: bool) -> None:
    if not is_admin:
        raise NotAuthorizedError("Admin privileges required")

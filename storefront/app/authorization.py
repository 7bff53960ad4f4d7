"""Role and ownership checks applied after a resource has been loaded."""

from uuid import UUID

from storefront.domain.exceptions import AuthorizationError
from storefront.domain.models.user import Role
from storefront.domain.principal import Principal


def require_role(principal: Principal, *roles: Role, action: str = "perform this action") -> None:
    """Reject callers whose role is not one of ``roles``.

    Raises:
        AuthorizationError: If the principal's role is not allowed
    """
    if principal.role not in roles:
        allowed = " or ".join(f"{role.value}s" for role in roles)
        raise AuthorizationError(f"Only {allowed} can {action}")


def ensure_owner(owner_id: UUID, principal: Principal, action: str = "modify this resource") -> None:
    """Reject callers who do not own the resource.

    There is no role-based bypass: admins are treated like any other non-owner.
    Callers must confirm the resource exists first, so a missing resource is
    reported as not found rather than forbidden.

    Raises:
        AuthorizationError: If ``owner_id`` differs from the principal's id
    """
    if owner_id != principal.id:
        raise AuthorizationError(f"Not authorized to {action}")

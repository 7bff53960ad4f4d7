"""Tests for role and ownership checks.

Test Organization:
- TestRequireRole: Role gate for seller-only actions
- TestEnsureOwner: Ownership gate for product mutations
"""

import pytest
from uuid_extension import uuid7

from storefront.app.authorization import ensure_owner, require_role
from storefront.domain.exceptions import AuthorizationError
from storefront.domain.models.user import Role
from tests.factories import principal_factory


class TestRequireRole:
    """Test require_role."""

    def test_allows_matching_role(self) -> None:
        """Test a seller passes the seller gate."""
        require_role(principal_factory(role=Role.SELLER), Role.SELLER, action="create products")

    @pytest.mark.parametrize("role", [Role.CUSTOMER, Role.USER, Role.ADMIN])
    def test_rejects_other_roles(self, role: Role) -> None:
        """Test every other role, admin included, is refused with a 403 message.

        Arrange: Non-seller principal
        Act: Require seller role
        Assert: AuthorizationError naming the action
        """
        # Arrange
        principal = principal_factory(role=role)

        # Act / Assert
        with pytest.raises(AuthorizationError, match="Only sellers can create products") as info:
            require_role(principal, Role.SELLER, action="create products")
        assert info.value.status_code == 403


class TestEnsureOwner:
    """Test ensure_owner."""

    def test_allows_owner(self) -> None:
        principal = principal_factory()

        ensure_owner(principal.id, principal, action="update this product")

    @pytest.mark.parametrize("role", [Role.SELLER, Role.ADMIN])
    def test_rejects_non_owner_without_role_bypass(self, role: Role) -> None:
        """Test non-owners are refused, admins included."""
        with pytest.raises(AuthorizationError, match="Not authorized to update this product"):
            ensure_owner(uuid7(), principal_factory(role=role), action="update this product")

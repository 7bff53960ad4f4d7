"""Authenticated caller identity."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from storefront.domain.models.user import AccountStatus, Role


class Principal(BaseModel):
    """Identity of the caller for the lifetime of one request.

    Built by the authentication guard from a verified token and the current
    user record, then passed explicitly to every operation that needs it.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    name: str
    email: str
    role: Role
    status: AccountStatus

    @property
    def is_seller(self) -> bool:
        return self.role == Role.SELLER

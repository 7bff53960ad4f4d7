"""Request dependencies shared by the v1 endpoints.

- ``get_current_principal``: bearer-token guard producing a ``Principal``
- ``validated_body``/``validated_query``: trim untrusted input, then validate
  it against a schema, reporting every violation at once
"""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from dependency_injector.wiring import Provide, inject
from fastapi import Body, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from storefront.app.usecases.auth_usecases import AuthenticateUseCase
from storefront.container import Container
from storefront.domain.exceptions import ValidationError
from storefront.domain.principal import Principal
from storefront.domain.validation import Err, validate_payload
from storefront.utils.sanitizer import trim_strings


bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token from /auth/login")


@inject
async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    use_case: AuthenticateUseCase = Depends(Provide[Container.use_cases.authenticate]),
) -> Principal:
    """Authenticate the request from its ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: If the header is missing or its user is unusable
        JoseError: If the token is invalid or expired (rendered as 401)
    """
    return await use_case.execute(credentials.credentials if credentials else None)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def _check[M: BaseModel](schema: type[M], raw: Any, root: str) -> M:
    result = validate_payload(schema, trim_strings(raw), root=root)
    if isinstance(result, Err):
        raise ValidationError(details=[v.to_dict() for v in result.violations])
    return result.value


def validated_body[M: BaseModel](schema: type[M]) -> Callable[..., Awaitable[M]]:
    """Build a dependency that validates the JSON body against ``schema``.

    Example:
        ```python
        @router.post("/products")
        async def create(payload: Annotated[ProductCreate, Depends(validated_body(ProductCreate))]):
            ...
        ```
    """

    async def dependency(raw: Annotated[dict[str, Any], Body()]) -> M:
        return _check(schema, raw, root="body")

    return dependency


def validated_query[M: BaseModel](schema: type[M]) -> Callable[..., Awaitable[M]]:
    """Build a dependency that validates the query string against ``schema``."""

    async def dependency(request: Request) -> M:
        return _check(schema, dict(request.query_params), root="query")

    return dependency

"""Account API endpoints: registration, login and the current user."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from storefront.app.usecases.auth_usecases import AuthResult, LoginUseCase, RegisterUserUseCase
from storefront.container import Container
from storefront.domain.models.user import Role
from storefront.presentation.api.dependencies import CurrentPrincipal, validated_body
from storefront.presentation.api.middleware.rate_limiting import AUTH_SCOPE, rate_limited
from storefront.presentation.schemas.auth import (
    AuthData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    UserSummary,
)
from storefront.presentation.schemas.common import DataResponse, MessageDataResponse
from storefront.presentation.schemas.error import ErrorResponse


router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(result: AuthResult) -> AuthData:
    return AuthData(user=UserResponse.model_validate(result.user), token=result.token)


@router.post(
    "/register",
    response_model=MessageDataResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited(AUTH_SCOPE))],
    summary="Register",
    description="Create a customer or seller account and receive an access token",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid input", "model": ErrorResponse},
        status.HTTP_409_CONFLICT: {
            "description": "Email already registered",
            "model": ErrorResponse,
        },
        status.HTTP_429_TOO_MANY_REQUESTS: {
            "description": "Too many failed attempts",
            "model": ErrorResponse,
        },
    },
)
@inject
async def register(
    payload: Annotated[RegisterRequest, Depends(validated_body(RegisterRequest))],
    use_case: Annotated[
        RegisterUserUseCase, Depends(Provide[Container.use_cases.register_user])
    ],
) -> MessageDataResponse[AuthData]:
    """Register a new account.

    Returns:
        The created user and a bearer token
    """
    result = await use_case.execute(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=Role(payload.role),
    )
    return MessageDataResponse[AuthData](
        message="User registered successfully", data=_auth_payload(result)
    )


@router.post(
    "/login",
    response_model=MessageDataResponse[AuthData],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limited(AUTH_SCOPE))],
    summary="Login",
    description="Exchange email and password for an access token",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid input", "model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {
            "description": "Wrong credentials or inactive account",
            "model": ErrorResponse,
        },
        status.HTTP_429_TOO_MANY_REQUESTS: {
            "description": "Too many failed attempts",
            "model": ErrorResponse,
        },
    },
)
@inject
async def login(
    payload: Annotated[LoginRequest, Depends(validated_body(LoginRequest))],
    use_case: Annotated[LoginUseCase, Depends(Provide[Container.use_cases.login])],
) -> MessageDataResponse[AuthData]:
    """Sign in and record the login time."""
    result = await use_case.execute(email=payload.email, password=payload.password)
    return MessageDataResponse[AuthData](message="Login successful", data=_auth_payload(result))


@router.get(
    "/me",
    response_model=DataResponse[UserSummary],
    status_code=status.HTTP_200_OK,
    summary="Current User",
    description="Return the account the bearer token belongs to",
    responses={
        status.HTTP_401_UNAUTHORIZED: {
            "description": "Missing, invalid or expired token",
            "model": ErrorResponse,
        },
    },
)
async def me(principal: CurrentPrincipal) -> DataResponse[UserSummary]:
    """Return the authenticated caller."""
    return DataResponse[UserSummary](data=UserSummary.model_validate(principal))

"""API schemas."""

from storefront.presentation.schemas.auth import (
    AuthData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    UserSummary,
)
from storefront.presentation.schemas.common import (
    DataResponse,
    MessageDataResponse,
    MessageResponse,
    PageResponse,
    PaginationResponse,
)
from storefront.presentation.schemas.error import ErrorItem, ErrorResponse
from storefront.presentation.schemas.product import (
    ProductCreate,
    ProductListQuery,
    ProductResponse,
    ProductUpdate,
    SellerProductsResponse,
    SellerStatsResponse,
)


__all__ = [
    "AuthData",
    "DataResponse",
    "ErrorItem",
    "ErrorResponse",
    "LoginRequest",
    "MessageDataResponse",
    "MessageResponse",
    "PageResponse",
    "PaginationResponse",
    "ProductCreate",
    "ProductListQuery",
    "ProductResponse",
    "ProductUpdate",
    "RegisterRequest",
    "SellerProductsResponse",
    "SellerStatsResponse",
    "UserResponse",
    "UserSummary",
]

"""Application use cases."""

from storefront.app.usecases.auth_usecases import (
    AuthenticateUseCase,
    AuthResult,
    LoginUseCase,
    RegisterUserUseCase,
)
from storefront.app.usecases.product_usecases import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    GetSellerProductsUseCase,
    ListProductsUseCase,
    SellerDashboard,
    UpdateProductUseCase,
)


__all__ = [
    "AuthResult",
    "AuthenticateUseCase",
    "CreateProductUseCase",
    "DeleteProductUseCase",
    "GetProductUseCase",
    "GetSellerProductsUseCase",
    "ListProductsUseCase",
    "LoginUseCase",
    "RegisterUserUseCase",
    "SellerDashboard",
    "UpdateProductUseCase",
]

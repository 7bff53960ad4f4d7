"""Dependency injection container configuration."""

from typing import Any

from dependency_injector import containers, providers

from storefront.app.usecases.auth_usecases import (
    AuthenticateUseCase,
    LoginUseCase,
    RegisterUserUseCase,
)
from storefront.app.usecases.product_usecases import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    GetSellerProductsUseCase,
    ListProductsUseCase,
    UpdateProductUseCase,
)
from storefront.external.image_service import CloudinaryImageStorage
from storefront.external.interfaces import IImageStorage
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.patterns.circuit_breaker import CircuitBreakerService
from storefront.infrastructure.persistence.database import Database
from storefront.infrastructure.persistence.unit_of_work import UnitOfWork
from storefront.infrastructure.security.passwords import PasswordHasher
from storefront.infrastructure.security.tokens import TokenService


class UseCases(containers.DeclarativeContainer):
    """Use cases container for better organization."""

    uow_factory: providers.Dependency[Any] = providers.Dependency()
    password_hasher: providers.Dependency[PasswordHasher] = providers.Dependency()
    token_service: providers.Dependency[TokenService] = providers.Dependency()
    image_storage: providers.Dependency[IImageStorage] = providers.Dependency()

    # Accounts
    register_user = providers.Factory(
        RegisterUserUseCase,
        uow_factory=uow_factory,
        password_hasher=password_hasher,
        token_service=token_service,
    )
    login = providers.Factory(
        LoginUseCase,
        uow_factory=uow_factory,
        password_hasher=password_hasher,
        token_service=token_service,
    )
    authenticate = providers.Factory(
        AuthenticateUseCase, uow_factory=uow_factory, token_service=token_service
    )

    # Products
    list_products = providers.Factory(ListProductsUseCase, uow_factory=uow_factory)
    get_product = providers.Factory(GetProductUseCase, uow_factory=uow_factory)
    create_product = providers.Factory(
        CreateProductUseCase, uow_factory=uow_factory, image_storage=image_storage
    )
    update_product = providers.Factory(
        UpdateProductUseCase, uow_factory=uow_factory, image_storage=image_storage
    )
    delete_product = providers.Factory(DeleteProductUseCase, uow_factory=uow_factory)
    get_seller_products = providers.Factory(GetSellerProductsUseCase, uow_factory=uow_factory)


class Container(containers.DeclarativeContainer):
    """Application dependency injection container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "storefront.presentation.api.dependencies",
            "storefront.presentation.api.v1.endpoints.auth",
            "storefront.presentation.api.v1.endpoints.products",
            "storefront.presentation.api.v1.endpoints.health",
        ]
    )

    # Configuration
    config = providers.Singleton(get_settings)

    # Infrastructure
    database = providers.Singleton(Database, settings=config)
    circuit_breaker = providers.Singleton(CircuitBreakerService)

    # Security
    password_hasher = providers.Singleton(PasswordHasher, rounds=config.provided.bcrypt_rounds)
    token_service = providers.Singleton(TokenService, settings=config)

    # Session factory for Unit of Work
    session_factory_provider = database.provided.get_session_factory.call()

    # Unit of Work factory: one transaction per use case execution
    uow_factory = providers.Factory(
        UnitOfWork,
        session_factory=session_factory_provider,
    )

    # External Services
    image_storage = providers.Singleton(
        CloudinaryImageStorage,
        circuit_breaker=circuit_breaker,
        settings=config,
    )

    # Use Cases (nested container)
    use_cases = providers.Container(
        UseCases,
        uow_factory=uow_factory.provider,
        password_hasher=password_hasher,
        token_service=token_service,
        image_storage=image_storage,
    )

"""Product use cases implementing catalog and seller inventory operations."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from structlog import get_logger

from storefront.app.authorization import ensure_owner, require_role
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.models.product import Product, ProductStatus, SellerStats
from storefront.domain.models.user import Role
from storefront.domain.pagination import Page, PageParams
from storefront.domain.principal import Principal
from storefront.external.interfaces import IImageStorage
from storefront.infrastructure.filtering.product_filterset import ProductFilterSet, ProductSort
from storefront.infrastructure.persistence.unit_of_work import UnitOfWork


logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"name", "description", "price", "category", "stock", "images", "status"}
)


@dataclass(frozen=True, slots=True)
class SellerDashboard:
    """A page of a seller's own listings plus inventory totals."""

    page: Page[Product]
    stats: SellerStats


async def _get_product_or_404(uow: UnitOfWork, product_id: UUID | str) -> Product:
    product = await uow.products.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundError("Product")
    return product


async def _get_product_for_update(
    uow: UnitOfWork, principal: Principal, product_id: UUID | str
) -> Product:
    product = await _get_product_or_404(uow, product_id)
    ensure_owner(product.seller_id, principal, action="update this product")
    return product


class ListProductsUseCase:
    """Use case for browsing active listings."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(
        self,
        filters: ProductFilterSet,
        page: PageParams,
        sort: str = ProductSort.DEFAULT,
    ) -> Page[Product]:
        """Execute the use case.

        Only ``active`` products are listed, whatever status filter was supplied.
        """
        filters = filters.model_copy(update={"status": ProductStatus.ACTIVE})
        async with self._uow_factory() as uow:
            return await uow.products.find_page(filters, page, sort)


class GetProductUseCase:
    """Use case for fetching a single product."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(self, product_id: UUID | str) -> Product:
        """Execute the use case.

        Raises:
            EntityNotFoundError: If no product has this id
            MalformedIdentifierError: If ``product_id`` is not a valid id (rendered as not found)
        """
        async with self._uow_factory() as uow:
            return await _get_product_or_404(uow, product_id)


class CreateProductUseCase:
    """Use case for a seller publishing a new listing."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork], image_storage: IImageStorage) -> None:
        self._uow_factory = uow_factory
        self._image_storage = image_storage

    async def execute(
        self,
        principal: Principal,
        *,
        name: str,
        description: str,
        price: Decimal,
        category: str,
        stock: int,
        images: list[str],
    ) -> Product:
        """Execute the use case.

        Images are uploaded before the transaction opens. The stored status is
        derived from stock (``out_of_stock`` when stock is zero).

        Raises:
            AuthorizationError: If the caller is not a seller
        """
        require_role(principal, Role.SELLER, action="create products")

        image_urls = await self._image_storage.upload_many(images)

        async with self._uow_factory() as uow:
            product = await uow.products.create(
                Product(
                    seller_id=principal.id,
                    name=name,
                    description=description,
                    price=price,
                    category=category,
                    stock=stock,
                    images=image_urls,
                )
            )

        logger.info(
            "product_created",
            product_id=str(product.id),
            seller_id=str(principal.id),
            status=product.status.value,
        )
        return product


class UpdateProductUseCase:
    """Use case for a seller editing one of their listings."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork], image_storage: IImageStorage) -> None:
        self._uow_factory = uow_factory
        self._image_storage = image_storage

    async def execute(
        self, principal: Principal, product_id: UUID | str, changes: Mapping[str, Any]
    ) -> Product:
        """Execute the use case.

        Args:
            principal: Authenticated caller
            product_id: Product to update
            changes: Fields to overwrite; absent fields are left untouched

        Raises:
            EntityNotFoundError: If the product does not exist (checked before ownership)
            AuthorizationError: If the caller does not own the product
            ValidationError: If ``changes`` contains nothing updatable
        """
        updates = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if not updates:
            raise ValidationError("At least one field must be provided for update")

        if "images" in updates:
            # Upload outside the transaction, once the caller is known to own the product
            async with self._uow_factory() as uow:
                await _get_product_for_update(uow, principal, product_id)
            updates["images"] = await self._image_storage.upload_many(updates["images"])

        async with self._uow_factory() as uow:
            product = await _get_product_for_update(uow, principal, product_id)
            for field, value in updates.items():
                setattr(product, field, value)
            # Status is recomputed from stock on flush; an explicit inactive is kept
            product = await uow.products.update(product)

        logger.info(
            "product_updated",
            product_id=str(product.id),
            fields=sorted(updates),
            status=product.status.value,
        )
        return product


class DeleteProductUseCase:
    """Use case for a seller removing one of their listings."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(self, principal: Principal, product_id: UUID | str) -> None:
        """Execute the use case (hard delete).

        Raises:
            EntityNotFoundError: If the product does not exist (checked before ownership)
            AuthorizationError: If the caller does not own the product
        """
        async with self._uow_factory() as uow:
            product = await _get_product_or_404(uow, product_id)
            ensure_owner(product.seller_id, principal, action="delete this product")
            await uow.products.delete(product)

        logger.info("product_deleted", product_id=str(product.id), seller_id=str(principal.id))


class GetSellerProductsUseCase:
    """Use case for a seller's inventory dashboard."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(
        self,
        principal: Principal,
        filters: ProductFilterSet,
        page: PageParams,
        sort: str = ProductSort.DEFAULT,
    ) -> SellerDashboard:
        """Execute the use case.

        Lists the caller's own products in every status. Stats always cover the
        whole inventory, independent of filters and paging.

        Raises:
            AuthorizationError: If the caller is not a seller
        """
        require_role(principal, Role.SELLER, action="view seller inventory")

        filters = filters.model_copy(update={"seller_id": principal.id})
        async with self._uow_factory() as uow:
            result = await uow.products.find_page(filters, page, sort)
            stats = await uow.products.stats_for_seller(principal.id)

        return SellerDashboard(page=result, stats=stats)

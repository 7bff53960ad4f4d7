"""Product repository for database operations."""

from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.interfaces import IProductRepository
from storefront.domain.models.product import Product, ProductStatus, SellerStats
from storefront.domain.pagination import Page, PageInfo, PageParams
from storefront.infrastructure.constants import ProductLimits
from storefront.infrastructure.filtering.product_filterset import ProductSort
from storefront.infrastructure.repositories.base_repository import BaseRepository


if TYPE_CHECKING:
    from storefront.infrastructure.filtering.filterset import FilterSet
else:
    FilterSet = Any


def _count_where(condition: Any) -> Any:
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class ProductRepository(BaseRepository[Product], IProductRepository):
    """Product-specific repository with paging and seller aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    @staticmethod
    def order_clauses(sort: str) -> list[Any]:
        """Translate a sort key such as ``-price`` into ORDER BY clauses."""
        field, descending = ProductSort.parse(sort)
        column = getattr(Product, field)
        # id breaks ties so pages never overlap
        if descending:
            return [column.desc(), Product.id.desc()]
        return [column.asc(), Product.id.asc()]

    async def find_page(
        self, filterset: "FilterSet", params: PageParams, sort: str = ProductSort.DEFAULT
    ) -> Page[Product]:
        """Return one page of products plus pagination metadata."""
        total = await self.count(filterset)
        items = await self.find(
            filterset,
            skip=params.offset,
            limit=params.limit,
            order_by=self.order_clauses(sort),
        )
        return Page(items=items, info=PageInfo.build(params.page, params.limit, total))

    async def stats_for_seller(self, seller_id: UUID) -> SellerStats:
        """Aggregate inventory figures for one seller in a single query."""
        query = select(
            func.count(Product.id),
            _count_where(Product.status == ProductStatus.ACTIVE),
            _count_where(Product.status == ProductStatus.INACTIVE),
            _count_where(Product.status == ProductStatus.OUT_OF_STOCK),
            _count_where(
                (Product.stock > 0) & (Product.stock < ProductLimits.LOW_STOCK_THRESHOLD)
            ),
            func.coalesce(func.sum(Product.stock), 0),
            func.coalesce(func.sum(Product.price * Product.stock), 0),
        ).where(Product.seller_id == seller_id)

        row = (await self._session.execute(query)).one()
        total, active, inactive, out_of_stock, low_stock, total_stock, value = row
        return SellerStats(
            total_products=int(total),
            active_products=int(active),
            inactive_products=int(inactive),
            out_of_stock_products=int(out_of_stock),
            low_stock_products=int(low_stock),
            total_stock=int(total_stock),
            inventory_value=Decimal(str(value)).quantize(Decimal("0.01")),
        )

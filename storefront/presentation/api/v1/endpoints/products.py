"""Product API endpoints: public catalog and seller inventory management."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Path, status

from storefront.app.usecases.product_usecases import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    GetSellerProductsUseCase,
    ListProductsUseCase,
    UpdateProductUseCase,
)
from storefront.container import Container
from storefront.domain.models.product import Product
from storefront.domain.pagination import Page, PageParams
from storefront.presentation.api.dependencies import (
    CurrentPrincipal,
    validated_body,
    validated_query,
)
from storefront.presentation.api.middleware.rate_limiting import (
    PRODUCT_CREATION_SCOPE,
    rate_limited,
)
from storefront.presentation.schemas.common import (
    DataResponse,
    MessageDataResponse,
    MessageResponse,
    PageResponse,
    PaginationResponse,
)
from storefront.presentation.schemas.error import ErrorResponse
from storefront.presentation.schemas.product import (
    ProductCreate,
    ProductListQuery,
    ProductResponse,
    ProductUpdate,
    SellerProductsResponse,
    SellerStatsResponse,
)


router = APIRouter(prefix="/products", tags=["products"])

ProductId = Annotated[str, Path(description="Product id")]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "No such product", "model": ErrorResponse}}
_UNAUTHORIZED = {
    status.HTTP_401_UNAUTHORIZED: {"description": "Not authenticated", "model": ErrorResponse}
}
_FORBIDDEN = {status.HTTP_403_FORBIDDEN: {"description": "Not allowed", "model": ErrorResponse}}
_INVALID = {status.HTTP_400_BAD_REQUEST: {"description": "Invalid input", "model": ErrorResponse}}
_TOO_MANY = {
    status.HTTP_429_TOO_MANY_REQUESTS: {
        "description": "Creation limit reached",
        "model": ErrorResponse,
    }
}


def _page_params(query: ProductListQuery) -> PageParams:
    return PageParams(page=query.page, limit=query.limit)


def _page_response(page: Page[Product]) -> PageResponse[ProductResponse]:
    return PageResponse[ProductResponse](
        data=[ProductResponse.model_validate(item) for item in page.items],
        pagination=PaginationResponse.from_page_info(page.info),
    )


@router.get(
    "",
    response_model=PageResponse[ProductResponse],
    summary="List Products",
    description="Browse active listings with filters (category, minPrice, maxPrice, search), "
    "sorting and pagination",
    responses=_INVALID,
)
@inject
async def list_products(
    query: Annotated[ProductListQuery, Depends(validated_query(ProductListQuery))],
    use_case: Annotated[ListProductsUseCase, Depends(Provide[Container.use_cases.list_products])],
) -> PageResponse[ProductResponse]:
    """List active products, newest first unless ``sort`` says otherwise."""
    page = await use_case.execute(query, _page_params(query), query.sort)
    return _page_response(page)


@router.post(
    "",
    response_model=MessageDataResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    description="Publish a new listing. Images are uploaded before the product is stored.",
    responses={**_INVALID, **_UNAUTHORIZED, **_FORBIDDEN, **_TOO_MANY},
    dependencies=[Depends(rate_limited(PRODUCT_CREATION_SCOPE))],
)
@inject
async def create_product(
    principal: CurrentPrincipal,
    payload: Annotated[ProductCreate, Depends(validated_body(ProductCreate))],
    use_case: Annotated[
        CreateProductUseCase, Depends(Provide[Container.use_cases.create_product])
    ],
) -> MessageDataResponse[ProductResponse]:
    """Create a product owned by the calling seller."""
    product = await use_case.execute(
        principal,
        name=payload.name,
        description=payload.description,
        price=payload.price,
        category=payload.category,
        stock=payload.stock,
        images=payload.images,
    )
    return MessageDataResponse[ProductResponse](
        message="Product created successfully", data=ProductResponse.model_validate(product)
    )


# Registered before "/{product_id}" so "seller" is not taken for an id
@router.get(
    "/seller",
    response_model=SellerProductsResponse,
    summary="Seller Inventory",
    description="The caller's own listings in every status, plus inventory stats",
    responses={**_INVALID, **_UNAUTHORIZED, **_FORBIDDEN},
)
@inject
async def seller_products(
    principal: CurrentPrincipal,
    query: Annotated[ProductListQuery, Depends(validated_query(ProductListQuery))],
    use_case: Annotated[
        GetSellerProductsUseCase, Depends(Provide[Container.use_cases.get_seller_products])
    ],
) -> SellerProductsResponse:
    """Return a page of the seller's products with whole-inventory stats."""
    dashboard = await use_case.execute(principal, query, _page_params(query), query.sort)
    page = _page_response(dashboard.page)
    return SellerProductsResponse(
        data=page.data,
        pagination=page.pagination,
        stats=SellerStatsResponse.model_validate(dashboard.stats),
    )


@router.get(
    "/{product_id}",
    response_model=DataResponse[ProductResponse],
    summary="Get Product",
    responses=_NOT_FOUND,
)
@inject
async def get_product(
    product_id: ProductId,
    use_case: Annotated[GetProductUseCase, Depends(Provide[Container.use_cases.get_product])],
) -> DataResponse[ProductResponse]:
    """Fetch one product in any status."""
    product = await use_case.execute(product_id)
    return DataResponse[ProductResponse](data=ProductResponse.model_validate(product))


@router.put(
    "/{product_id}",
    response_model=MessageDataResponse[ProductResponse],
    summary="Update Product",
    description="Partially update a listing owned by the caller",
    responses={**_INVALID, **_UNAUTHORIZED, **_FORBIDDEN, **_NOT_FOUND},
)
@inject
async def update_product(
    product_id: ProductId,
    principal: CurrentPrincipal,
    payload: Annotated[ProductUpdate, Depends(validated_body(ProductUpdate))],
    use_case: Annotated[
        UpdateProductUseCase, Depends(Provide[Container.use_cases.update_product])
    ],
) -> MessageDataResponse[ProductResponse]:
    """Apply the supplied fields; status is re-derived from stock."""
    product = await use_case.execute(principal, product_id, payload.changes())
    return MessageDataResponse[ProductResponse](
        message="Product updated successfully", data=ProductResponse.model_validate(product)
    )


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete Product",
    responses={**_UNAUTHORIZED, **_FORBIDDEN, **_NOT_FOUND},
)
@inject
async def delete_product(
    product_id: ProductId,
    principal: CurrentPrincipal,
    use_case: Annotated[
        DeleteProductUseCase, Depends(Provide[Container.use_cases.delete_product])
    ],
) -> MessageResponse:
    """Permanently remove a listing owned by the caller."""
    await use_case.execute(principal, product_id)
    return MessageResponse(message="Product deleted successfully")

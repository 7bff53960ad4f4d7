from fastapi import APIRouter

from storefront.presentation.api.v1.endpoints import auth, health, products


api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(products.router)

# storefront/shop.py
from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_user
from .catalog_service import CatalogService
from .database import get_session
from .models import User
from .schemas import MAX_INT, Message, ProductCreate, ProductOut, ProductUpdate

router = APIRouter(prefix="/api/products", tags=["products"])


def get_catalog(session: AsyncSession = Depends(get_session)) -> CatalogService:
    return CatalogService(session)


@router.get("", response_model=List[ProductOut])
async def list_products(catalog: CatalogService = Depends(get_catalog)):
    return await catalog.list_products()


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int = Path(ge=1, le=MAX_INT), catalog: CatalogService = Depends(get_catalog)):
    return await catalog.require_product(product_id)


# mutations are limited to logged-in users
@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
@router.post("/add", response_model=ProductOut, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_product(
    payload: ProductCreate,
    catalog: CatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user),
):
    return await catalog.create_product(payload.model_dump())


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    *,
    product_id: int = Path(ge=1, le=MAX_INT),
    payload: ProductUpdate,
    catalog: CatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user),
):
    return await catalog.update_product(product_id, payload.model_dump(exclude_unset=True))


@router.delete("/{product_id}", response_model=Message)
async def delete_product(
    product_id: int = Path(ge=1, le=MAX_INT),
    catalog: CatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user),
):
    await catalog.delete_product(product_id)
    return {"message": "Product deleted successfully"}

# storefront/cart.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_user
from .cart_service import CartService
from .catalog_service import CatalogService
from .database import get_session
from .models import User
from .schemas import MAX_INT, CartAddRequest, CartOut, CartQuantityRequest, Message

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_cart_service(session: AsyncSession = Depends(get_session)) -> CartService:
    return CartService(session, CatalogService(session))


@router.get("", response_model=CartOut)
async def get_cart(
    carts: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await carts.get_cart(current_user.id)


@router.post("/add", response_model=CartOut)
async def add_to_cart(
    payload: CartAddRequest,
    carts: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await carts.add_item(current_user.id, payload.product_id, payload.quantity)


@router.put("/{product_id}", response_model=CartOut)
async def update_cart_item(
    *,
    product_id: int = Path(ge=1, le=MAX_INT),
    payload: CartQuantityRequest,
    carts: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await carts.set_item_quantity(current_user.id, product_id, payload.quantity)


@router.delete("/{product_id}", response_model=CartOut)
async def remove_cart_item(
    product_id: int = Path(ge=1, le=MAX_INT),
    carts: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await carts.remove_item(current_user.id, product_id)


@router.delete("", response_model=Message)
async def clear_cart(
    carts: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    await carts.clear(current_user.id)
    return {"message": "Cart cleared"}

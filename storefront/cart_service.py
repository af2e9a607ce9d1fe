# storefront/cart_service.py
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from . import reconcile as rules
from .catalog_service import CatalogService
from .errors import NotFound
from .models import Cart

logger = logging.getLogger(__name__)

_UPSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CartService:
    """
    Per-user cart stored as a single row with embedded line items.

    Every mutation is one read-modify-write of that row: load it, run the
    matching rule from ``storefront.reconcile`` and assign the new list back.
    """

    def __init__(self, session: AsyncSession, catalog: CatalogService):
        self.session = session
        self.catalog = catalog

    # query
    async def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = await self._load(user_id)
        if cart is None:
            raise NotFound("Cart not found")
        return await self._view(cart)

    # commands
    async def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        rules.check_quantity(quantity)
        await self.catalog.require_product(product_id)

        cart = await self._find_or_create(user_id)
        merged = rules.find_line(cart.items, product_id) is not None
        cart.items = rules.reconcile(cart.items, product_id, quantity)
        await self.session.commit()

        logger.info(
            "%s product %s x%s in cart of user %s",
            "Merged" if merged else "Appended", product_id, quantity, user_id,
        )
        return await self._view(cart)

    async def set_item_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        rules.check_quantity(quantity)
        cart = await self._require(user_id)
        cart.items = rules.set_quantity(cart.items, product_id, quantity)
        await self.session.commit()

        logger.info("Set product %s to x%s in cart of user %s", product_id, quantity, user_id)
        return await self._view(cart)

    async def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = await self._require(user_id)
        cart.items = rules.remove_item(cart.items, product_id)
        await self.session.commit()

        logger.info("Removed product %s from cart of user %s", product_id, user_id)
        return await self._view(cart)

    async def clear(self, user_id: int) -> None:
        result = await self.session.execute(delete(Cart).where(Cart.user_id == user_id))
        await self.session.commit()
        logger.info("Cleared cart of user %s (rows=%s)", user_id, result.rowcount)

    async def _load(self, user_id: int, for_update: bool = False) -> Optional[Cart]:
        stmt = select(Cart).where(Cart.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _require(self, user_id: int) -> Cart:
        cart = await self._load(user_id, for_update=True)
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    async def _find_or_create(self, user_id: int) -> Cart:
        # INSERT ... ON CONFLICT DO NOTHING on the unique user_id, so two first adds
        # racing for the same user end up sharing one row
        insert = _UPSERTS[self.session.get_bind().dialect.name]
        stmt = (
            insert(Cart.__table__)
            .values(user_id=user_id, items=[])
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
        result = await self.session.execute(stmt)
        if result.rowcount:
            logger.info("Created cart for user %s", user_id)
        return await self._load(user_id, for_update=True)

    async def _view(self, cart: Cart) -> Dict[str, Any]:
        products = await self.catalog.get_products(item["product_id"] for item in cart.items)

        total = Decimal("0.00")
        lines = []
        for item in cart.items:
            product = products.get(item["product_id"])
            if product is not None:
                total += Decimal(product.price) * item["quantity"]
            lines.append({
                "product_id": item["product_id"],
                "quantity": item["quantity"],
                "product": _product_dict(product) if product is not None else None,
            })

        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": lines,
            "count": len(lines),
            "total": total,
        }


def _product_dict(product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
    }

# storefront/catalog_service.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import NotFound
from .models import Product

logger = logging.getLogger(__name__)


class CatalogService:
    """Create/read/update/delete for products."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_products(self) -> List[Product]:
        result = await self.session.execute(select(Product).order_by(Product.id.desc()))
        return list(result.scalars().all())

    async def get_product(self, product_id: int) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def require_product(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    async def get_products(self, product_ids) -> Dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(Product).where(Product.id.in_(ids)))
        return {p.id: p for p in result.scalars().all()}

    async def create_product(self, data: Dict[str, Any]) -> Product:
        product = Product(
            name=data["name"],
            description=data.get("description"),
            price=data["price"],
            stock=data.get("stock", 0),
        )
        self.session.add(product)
        await self.session.commit()
        await self.session.refresh(product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def update_product(self, product_id: int, changes: Dict[str, Any]) -> Product:
        # only the fields present in `changes` are touched
        product = await self.require_product(product_id)
        for field, value in changes.items():
            setattr(product, field, value)

        await self.session.commit()
        await self.session.refresh(product)
        logger.info("Updated product %s fields=%s", product_id, sorted(changes))
        return product

    async def delete_product(self, product_id: int) -> None:
        product = await self.require_product(product_id)
        await self.session.delete(product)
        await self.session.commit()
        logger.info("Deleted product %s", product_id)

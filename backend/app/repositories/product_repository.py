import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import Database
from app.errors import ErrorType, DATABASE_ERROR_MESSAGE
from app.exceptions import AppException
from app.models import Product

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "price", "availability")


class ProductRepository:
    """Data access for the products table.

    Lookups return None when no row matches. Mutations read and write the row
    inside one transaction holding a row lock, so two concurrent updates to the
    same product are applied one after the other.
    """

    def __init__(self, db: Database):
        self.db = db

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.db.session() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error while trying to {action}: {e}")
            raise AppException(ErrorType.DATABASE_ERROR, DATABASE_ERROR_MESSAGE) from e

    async def find_all(self, order: str = "desc") -> list[Product]:
        order_by = Product.id.desc() if order == "desc" else Product.id.asc()
        async with self._transaction("list products") as session:
            result = await session.execute(select(Product).order_by(order_by))
            return list(result.scalars().all())

    async def find_by_id(self, product_id: int) -> Product | None:
        async with self._transaction(f"fetch product {product_id}") as session:
            return await session.get(Product, product_id)

    async def create(self, fields: dict[str, Any]) -> Product:
        product = Product(
            name=fields["name"],
            price=fields["price"],
            availability=fields.get("availability", True),
        )
        async with self._transaction("create product") as session:
            session.add(product)
            await session.flush()
            await session.refresh(product)
        logger.info(f"Created product {product.id}")
        return product

    async def update(self, product_id: int, fields: dict[str, Any]) -> Product | None:
        async with self._transaction(f"update product {product_id}") as session:
            product = await session.get(Product, product_id, with_for_update=True)
            if product is None:
                return None
            for key in UPDATABLE_FIELDS:
                if key in fields:
                    setattr(product, key, fields[key])
            await session.flush()
            await session.refresh(product)
        return product

    async def toggle_availability(self, product_id: int) -> Product | None:
        async with self._transaction(f"toggle availability of product {product_id}") as session:
            product = await session.get(Product, product_id, with_for_update=True)
            if product is None:
                return None
            product.availability = not product.availability
            await session.flush()
            await session.refresh(product)
        return product

    async def delete(self, product_id: int) -> bool:
        async with self._transaction(f"delete product {product_id}") as session:
            product = await session.get(Product, product_id, with_for_update=True)
            if product is None:
                return False
            await session.delete(product)
        logger.info(f"Deleted product {product_id}")
        return True

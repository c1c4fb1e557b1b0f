"""
Database maintenance commands.

    python -m app.db.manage --clear   # drop and recreate the products table
    python -m app.db.manage --seed    # insert sample products if the table is empty
"""
import argparse
import asyncio
from decimal import Decimal
from sqlalchemy import select
from app.config import Config
from app.db.database import Database
from app.models import Product


# Sample products
PRODUCTS_DATA = [
    ("Monitor Curvo de 49 Pulgadas", Decimal("400.00")),
    ("Audífonos Inalámbricos", Decimal("120.00")),
    ("Teclado Mecánico", Decimal("85.50")),
    ("Mouse Ergonómico", Decimal("35.99")),
    ("Silla de Oficina", Decimal("299.99")),
]


async def clear_database(db: Database):
    await db.drop_all()
    await db.create_all()
    print("Database cleared")


async def seed_database(db: Database) -> int:
    await db.create_all()

    async with db.session() as session:
        # Check if data exists
        result = await session.execute(select(Product).limit(1))
        if result.scalar():
            print("Database already seeded")
            return 0

        for name, price in PRODUCTS_DATA:
            session.add(Product(name=name, price=price))

        await session.commit()

    print(f"Database seeded with {len(PRODUCTS_DATA)} products")
    return len(PRODUCTS_DATA)


async def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Manage the products database")
    parser.add_argument("--clear", action="store_true", help="drop and recreate all tables")
    parser.add_argument("--seed", action="store_true", help="insert sample products")
    args = parser.parse_args(argv)

    if not (args.clear or args.seed):
        parser.error("nothing to do: pass --clear and/or --seed")

    config = Config.from_env()
    db = Database(config.database_url, echo=config.database_echo)
    try:
        if args.clear:
            await clear_database(db)
        if args.seed:
            await seed_database(db)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())

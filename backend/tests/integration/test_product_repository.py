import asyncio
import pytest
from app.db.database import Database
from app.errors import ErrorType
from app.exceptions import AppException
from app.repositories.product_repository import ProductRepository


@pytest.fixture
def repo(database):
    return ProductRepository(database)


class TestProductRepository:
    """Tests for the repository against SQLite."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, repo):
        product = await repo.create({"name": "Monitor", "price": 300})

        assert product.id == 1
        assert product.availability is True
        assert float(product.price) == 300
        assert product.created_at is not None

    @pytest.mark.asyncio
    async def test_find_all_orders(self, repo):
        for name in ["A", "B", "C"]:
            await repo.create({"name": name, "price": 1})

        assert [p.id for p in await repo.find_all()] == [3, 2, 1]
        assert [p.id for p in await repo.find_all(order="asc")] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_missing_rows_return_none(self, repo):
        assert await repo.find_by_id(99) is None
        assert await repo.update(99, {"name": "X"}) is None
        assert await repo.toggle_availability(99) is None
        assert await repo.delete(99) is False

    @pytest.mark.asyncio
    async def test_update_only_touches_known_fields(self, repo):
        created = await repo.create({"name": "Monitor", "price": 300})

        updated = await repo.update(created.id, {"name": "Monitor XL", "id": 500})

        assert updated.id == created.id
        assert updated.name == "Monitor XL"
        assert float(updated.price) == 300

    @pytest.mark.asyncio
    async def test_delete_removes_row(self, repo):
        created = await repo.create({"name": "Monitor", "price": 300})

        assert await repo.delete(created.id) is True
        assert await repo.find_by_id(created.id) is None

    @pytest.mark.asyncio
    async def test_toggle_negates_stored_value(self, repo):
        created = await repo.create({"name": "Monitor", "price": 300})

        for _ in range(3):
            await repo.toggle_availability(created.id)

        product = await repo.find_by_id(created.id)
        assert product.availability is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("calls,expected", [(10, True), (7, False)])
    async def test_concurrent_toggles_are_not_lost(self, repo, calls, expected):
        created = await repo.create({"name": "Monitor", "price": 300})

        results = await asyncio.gather(*(repo.toggle_availability(created.id) for _ in range(calls)))

        assert all(result is not None for result in results)
        product = await repo.find_by_id(created.id)
        assert product.availability is expected

    @pytest.mark.asyncio
    async def test_database_failure_raises_app_exception(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path / 'missing' / 'products.db'}")
        repo = ProductRepository(db)

        with pytest.raises(AppException) as exc_info:
            await repo.find_all()

        assert exc_info.value.error_type == ErrorType.DATABASE_ERROR
        await db.disconnect()

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

from app.config import Config
from app.db.database import Database
from app.dependencies import get_product_repository
from app.main import create_app
from app.models import Product
from app.repositories.product_repository import ProductRepository


@pytest.fixture
def app_config(tmp_path):
    """Configuration pointing at a throwaway SQLite file."""
    return Config(
        database_url=f"sqlite:///{tmp_path / 'products.db'}",
        frontend_url="http://localhost:5173",
    )


@pytest.fixture
async def database(app_config):
    """Real database with the products table created."""
    db = Database(app_config.database_url)
    await db.create_all()
    yield db
    await db.disconnect()


@pytest.fixture
def mock_repo():
    """Repository mock for testing without real DB connection."""
    return AsyncMock(spec=ProductRepository)


@pytest.fixture
def make_product():
    """Build detached Product rows for mocked repository responses."""
    def _make(id=1, name="Monitor", price="300.00", availability=True):
        return Product(id=id, name=name, price=Decimal(price), availability=availability)
    return _make


@pytest.fixture
async def client(app_config, mock_repo):
    """Async test client with the repository replaced by a mock."""
    app = create_app(app_config)
    app.dependency_overrides[get_product_repository] = lambda: mock_repo

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
async def db_client(app_config):
    """Async test client backed by a real SQLite database."""
    app = create_app(app_config)
    db = app.state.db
    # ASGITransport does not run the lifespan
    await db.create_all()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    await db.disconnect()

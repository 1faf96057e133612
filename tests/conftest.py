import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from src.config.database import Database, bindModels
from src.models.classModel import YogaClass
from src.commonUtils.enumUtils import ClassStatus


@pytest_asyncio.fixture(autouse=True)
async def db():
    """Bind the documents to a fresh in-memory database for every test"""
    client = AsyncMongoMockClient()
    await bindModels(client, "yoga-master-test")

    yield client["yoga-master-test"]

    Database.client = None


@pytest.fixture()
def make_class():
    async def _make_class(name="Morning Flow", price=20.0, status=ClassStatus.ACTIVE,
                          instructor_email="ana@yoga.test", **kwargs) -> YogaClass:
        yoga_class = YogaClass(name=name, price=price, status=status,
                               instructor_email=instructor_email, **kwargs)
        await yoga_class.insert()
        return yoga_class

    return _make_class


@pytest.fixture()
def app():
    # ASGITransport does not run the lifespan; the documents are bound by the db fixture
    from src.main import app

    return app


@pytest_asyncio.fixture()
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

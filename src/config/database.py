import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from pymongo.errors import PyMongoError

from src.models.classModel import YogaClass
from src.models.cartModel import Cart
from .settings import settings

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [YogaClass, Cart]


class Database:
    """Process-wide handle on the Motor client, set once at startup"""
    client: Optional[AsyncIOMotorClient] = None


async def bindModels(client, database_name: str = settings.MONGO_DATABASE):
    """Bind the beanie documents to a database of the given client"""
    Database.client = client
    await init_beanie(database=client[database_name], document_models=DOCUMENT_MODELS)


# Call this from within your event loop to get beanie setup.
async def startDB():
    client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard")

    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"Error while connecting to MongoDB: {e}")
        client.close()
        raise

    logger.info("Pinged your deployment. You successfully connected to MongoDB!")
    await bindModels(client)


async def pingDB() -> bool:
    if Database.client is None:
        return False
    try:
        await Database.client.admin.command("ping")
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
    return True


async def closeDB():
    if Database.client is not None:
        Database.client.close()
        Database.client = None

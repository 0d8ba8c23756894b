import os
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from pymongo.errors import ConfigurationError
from app.models.agent import Agent
from app.models.property import Property
from app.utils.logger import logger

db_initialized = False

async def ensure_beanie_initialized():
    global db_initialized
    if db_initialized:
        return

    mongo_uri = os.getenv("MONGODB_URI")
    if not mongo_uri:
        logger.critical("MONGODB_URI not found")
        return

    try:
        client = AsyncIOMotorClient(mongo_uri)

        # Safely get database name
        try:
            db = client.get_default_database()
        except ConfigurationError:
            # No default db in URI
            db = client[os.getenv("MONGODB_DB", "realestate")]

        await init_beanie(database=db, document_models=[Agent, Property])
        db_initialized = True
        logger.info("Beanie initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Beanie: {e}")

def is_initialized() -> bool:
    return db_initialized

async def ensure_db():
    """Router dependency so serverless cold starts get a database."""
    await ensure_beanie_initialized()

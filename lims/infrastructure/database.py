from beanie import init_beanie
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from lims.environment import environment
from lims.modules.lab.model import Lab
from lims.modules.master_test.model import MasterTest
from lims.modules.patient.model import Patient

client = AsyncIOMotorClient(environment.mongo_uri)
db = client[environment.mongo_db]


async def init_db() -> None:
    logger.info("Initializing database connection...")
    await init_beanie(
        database=db,
        document_models=[
            MasterTest,
            Patient,
            Lab,
        ],
    )

    logger.info("Database connection initialized successfully.")

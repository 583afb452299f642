from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger


class Environment(BaseSettings):
    mongo_uri: str = Field(...)
    mongo_db: str = Field(...)

    master_test_csv_chunk_size: int = Field(500)
    master_test_upload_extensions: list[str] = Field([".csv"])

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


environment = Environment()

logger.info("Environment variables loaded successfully.")

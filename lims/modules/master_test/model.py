from datetime import datetime, timezone
from uuid import uuid4

from beanie import Document
from pydantic import Field

from lims.modules.master_test.schema import MasterTestEntry, MasterTestSchemaBase


class MasterTest(Document, MasterTestSchemaBase):
    id: str = Field(default_factory=lambda: str(uuid4()))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "all_tests"
        indexes = ["name", "test_id"]


def document_to_entry(document: MasterTest) -> MasterTestEntry:
    return MasterTestEntry(
        **document.model_dump(include=set(MasterTestEntry.model_fields)),
    )

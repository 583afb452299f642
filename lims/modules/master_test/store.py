import re
from datetime import datetime, timezone
from typing import Protocol

from beanie.operators import Or, RegEx
from loguru import logger
from pymongo import ReplaceOne

from lims.modules.master_test.model import MasterTest, document_to_entry
from lims.modules.master_test.schema import MasterTestEntry


class CatalogStore(Protocol):
    async def find_by_name_matching_any(
        self, patterns: list[str]
    ) -> list[MasterTestEntry]: ...

    async def upsert_batch(self, entries: list[MasterTestEntry]) -> None: ...

    async def clear_all(self) -> None: ...

    async def list_all(self) -> list[MasterTestEntry]: ...


class BeanieCatalogStore:
    """Catalog store on the `all_tests` collection, keyed by entry id."""

    async def find_by_name_matching_any(
        self, patterns: list[str]
    ) -> list[MasterTestEntry]:
        if not patterns:
            return []
        # case-insensitive substring match per pattern
        documents = await MasterTest.find(
            Or(*[RegEx(MasterTest.name, re.escape(p), options="i") for p in patterns])
        ).to_list()
        logger.info(
            f"Found {len(documents)} existing master tests matching {len(patterns)} names"
        )
        return [document_to_entry(document) for document in documents]

    async def upsert_batch(self, entries: list[MasterTestEntry]) -> None:
        if not entries:
            return
        now = datetime.now(timezone.utc)
        operations = []
        for entry in entries:
            # interpretation and patient_friendly_interpretation are never both stored
            payload = entry.model_dump(mode="json", exclude_none=True)
            entry_id = payload.pop("id")
            payload["updated_at"] = now
            operations.append(ReplaceOne({"_id": entry_id}, payload, upsert=True))
        result = await MasterTest.get_motor_collection().bulk_write(operations)
        logger.info(
            f"Upserted master tests: {result.upserted_count} inserted, "
            f"{result.modified_count} replaced"
        )

    async def clear_all(self) -> None:
        result = await MasterTest.find_all().delete_many()
        deleted = result.deleted_count if result else 0
        logger.info(f"Cleared {deleted} master tests from the catalog")

    async def list_all(self) -> list[MasterTestEntry]:
        documents = await MasterTest.find_all().sort(
            +MasterTest.test_group, +MasterTest.ordering
        ).to_list()
        return [document_to_entry(document) for document in documents]

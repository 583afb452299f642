import os

# settings are read at import time, set them before importing project modules
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB", "lims_test")

from types import SimpleNamespace  # noqa: E402

import pandas as pd  # noqa: E402
import pytest  # noqa: E402
from beanie import init_beanie  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from lims.app import app, get_catalog_store  # noqa: E402
from lims.modules.lab.model import Lab  # noqa: E402
from lims.modules.master_test.const import CSV_HEADER  # noqa: E402
from lims.modules.master_test.model import MasterTest  # noqa: E402
from lims.modules.master_test.schema import MasterTestEntry  # noqa: E402
from lims.modules.patient.model import Patient  # noqa: E402


PATIENT = {
    "sample_id": "S-1001",
    "organization": "City Clinic",
    "register": "2026-10-01T09:00:00Z",
    "sample_collected": "2026-10-01T09:30:00Z",
    "approved_on": "2026-10-02T12:00:00Z",
    "name": "Jordan Doe",
    "phone_number": "5550100",
    "age": 42,
    "gender": "other",
    "referred_by": "Dr. Rao",
    "tests": [{"id": "t-1", "name": "CBC", "price": 300, "sub": "Haematology"}],
    "advance_payment": 100,
    "advance_payment_mode": "upi",
    "total_price": 300,
}


class StoreFailure(RuntimeError): ...


class InMemoryCatalogStore:
    """Dict-backed stand-in for the Mongo catalog, records every call."""

    def __init__(self, entries: list[MasterTestEntry] | None = None):
        self.documents: dict[str, MasterTestEntry] = {
            entry.id: entry for entry in entries or []
        }
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreFailure(f"{name} unavailable")

    async def find_by_name_matching_any(self, patterns: list[str]) -> list[MasterTestEntry]:
        self._call("find")
        lowered = [pattern.lower() for pattern in patterns]
        return [
            entry.model_copy(deep=True)
            for entry in self.documents.values()
            if any(pattern in entry.name.lower() for pattern in lowered)
        ]

    async def upsert_batch(self, entries: list[MasterTestEntry]) -> None:
        self._call("upsert")
        for entry in entries:
            self.documents[entry.id] = entry.model_copy(deep=True)

    async def clear_all(self) -> None:
        self._call("clear")
        self.documents.clear()

    async def list_all(self) -> list[MasterTestEntry]:
        self._call("list")
        return list(self.documents.values())


def make_csv(rows: list[dict[str, str]], header: list[str] | None = None) -> bytes:
    frame = pd.DataFrame(rows, columns=header or CSV_HEADER).fillna("")
    return frame.to_csv(index=False).encode("utf-8")


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_catalog_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _apply_bulk_writes_one_by_one(collection) -> None:
    # mongomock rejects the ReplaceOne objects of current pymongo in bulk_write
    async def bulk_write(operations, **kwargs):
        upserted = modified = 0
        for operation in operations:
            result = await collection.replace_one(
                operation._filter, operation._doc, upsert=operation._upsert
            )
            upserted += result.upserted_id is not None
            modified += result.modified_count
        return SimpleNamespace(upserted_count=upserted, modified_count=modified)

    collection.bulk_write = bulk_write


async def init_mock_database():
    """Fresh in-memory Mongo with every document model registered."""
    client = AsyncMongoMockClient()
    await init_beanie(
        database=client["lims_test"], document_models=[MasterTest, Patient, Lab]
    )
    _apply_bulk_writes_one_by_one(MasterTest.get_motor_collection())
    return client["lims_test"]

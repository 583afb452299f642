from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from loguru import logger

from lims.environment import environment
from lims.modules.master_test.errors import ValidationError
from lims.modules.master_test.normalize import to_master_test_entry
from lims.modules.master_test.parser import iter_csv_rows
from lims.modules.master_test.reconcile import create_master_tests
from lims.modules.master_test.schema import (
    MasterTestEntry,
    MasterTestUploadResponse,
    to_master_test_summary,
)
from lims.modules.master_test.store import CatalogStore


def validate_upload_filename(filename: str | None) -> None:
    if not filename:
        raise ValidationError("No file uploaded")
    extension = Path(filename).suffix.lower()
    if extension not in environment.master_test_upload_extensions:
        raise ValidationError(
            f"Unsupported file type {extension or '(none)'}, please upload a CSV file"
        )


def process_master_test_csv(buffer: bytes) -> list[MasterTestEntry]:
    entries: list[MasterTestEntry] = []
    skipped = 0
    for line, row in enumerate(iter_csv_rows(buffer), start=2):
        name = row.get("testName")
        if not isinstance(name, str) or not name.strip():
            logger.debug(f"Skipping CSV line {line}: no Test Name")
            skipped += 1
            continue
        entries.append(to_master_test_entry(row))
    logger.info(
        f"Normalized {len(entries)} master test rows, skipped {skipped} without a name"
    )
    return entries


async def upload_master_tests(
    filename: str | None,
    buffer: bytes,
    store: CatalogStore,
) -> MasterTestUploadResponse:
    logger.info(f"Master test upload received: {filename} ({len(buffer)} bytes)")
    validate_upload_filename(filename)

    # pandas parsing is CPU bound, keep it off the event loop
    entries = await run_in_threadpool(process_master_test_csv, buffer)
    if not entries:
        raise ValidationError("No valid test data found in CSV file")

    entries = await create_master_tests(entries, store)

    return MasterTestUploadResponse(
        success=True,
        message=f"Successfully processed {len(entries)} test records",
        data=[to_master_test_summary(entry) for entry in entries],
    )


async def list_master_tests(store: CatalogStore) -> list[MasterTestEntry]:
    entries = await store.list_all()
    logger.info(f"Listing {len(entries)} master tests")
    return entries

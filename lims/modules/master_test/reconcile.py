from uuid import uuid4

from loguru import logger

from lims.modules.master_test.errors import PersistenceError, ReconciliationError
from lims.modules.master_test.schema import MasterTestEntry
from lims.modules.master_test.store import CatalogStore


def new_identity() -> str:
    return str(uuid4())


def normalize_test_name(name: str | None) -> str:
    return (name or "").strip().lower()


def assign_component_ids(entries: list[MasterTestEntry]) -> int:
    assigned = 0
    for entry in entries:
        if not entry.component_id.strip():
            entry.component_id = new_identity()
            entry.master_test.component_id = entry.component_id
            assigned += 1
    return assigned


def group_by_test_name(
    entries: list[MasterTestEntry],
) -> dict[str, list[MasterTestEntry]]:
    """Entries without a test id, keyed by normalized test name."""
    groups: dict[str, list[MasterTestEntry]] = {}
    for entry in entries:
        if entry.test_id.strip():
            continue
        groups.setdefault(normalize_test_name(entry.name), []).append(entry)
    return groups


async def reconcile_master_tests(
    entries: list[MasterTestEntry],
    store: CatalogStore,
) -> list[MasterTestEntry]:
    """
    Give every entry a component id and a test id.

    Entries that arrive without a test id are grouped by normalized name; a
    group reuses the test id of an existing catalog entry with the same name,
    otherwise the whole group shares one freshly minted id. Entries that
    already carry a test id are left alone.
    """
    try:
        component_ids = assign_component_ids(entries)
        groups = group_by_test_name(entries)
        logger.info(
            f"Reconciling {len(entries)} master tests: {component_ids} new component ids, "
            f"{len(groups)} test names without a test id"
        )

        existing_test_ids: dict[str, str] = {}
        if groups:
            existing = await store.find_by_name_matching_any(list(groups))
            for test in existing:
                key = normalize_test_name(test.name)
                # the store match is a loose substring match; keep exact names only
                if key in groups and test.test_id and key not in existing_test_ids:
                    existing_test_ids[key] = test.test_id

        for key, members in groups.items():
            test_id = existing_test_ids.get(key) or new_identity()
            for entry in members:
                entry.test_id = test_id
                entry.master_test.test_id = test_id
    except Exception as exc:
        logger.exception(f"Failed to reconcile master tests: {exc}")
        raise ReconciliationError(f"Failed to reconcile master tests: {exc}") from exc

    logger.info(
        f"Reused {len(existing_test_ids)} existing test ids, "
        f"minted {len(groups) - len(existing_test_ids)} new ones"
    )
    return entries


async def replace_catalog(
    entries: list[MasterTestEntry],
    store: CatalogStore,
) -> None:
    # clear and upsert are separate writes; a failure in between leaves the
    # catalog empty or partly repopulated
    try:
        await store.clear_all()
        await store.upsert_batch(entries)
    except Exception as exc:
        logger.exception(f"Failed to write master test catalog: {exc}")
        raise PersistenceError(
            f"Failed to save master tests, the catalog may be partially replaced: {exc}"
        ) from exc
    logger.info(f"Master test catalog replaced with {len(entries)} entries")


async def create_master_tests(
    entries: list[MasterTestEntry],
    store: CatalogStore,
) -> list[MasterTestEntry]:
    entries = await reconcile_master_tests(entries, store)
    await replace_catalog(entries, store)
    return entries

import asyncio

import pytest

from lims.modules.master_test.errors import PersistenceError, ReconciliationError
from lims.modules.master_test.reconcile import (
    create_master_tests,
    group_by_test_name,
    reconcile_master_tests,
    replace_catalog,
)
from lims.modules.master_test.schema import MasterTestEntry

from conftest import InMemoryCatalogStore


def entry(name: str, **fields) -> MasterTestEntry:
    return MasterTestEntry(name=name, **fields)


def test_same_name_shares_one_fresh_test_id(store):
    batch = [entry("CBC", component_name="Hb"), entry("CBC", component_name="Hct")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert batch[0].test_id
    assert batch[0].test_id == batch[1].test_id
    assert batch[0].master_test.test_id == batch[0].test_id


def test_names_group_case_and_whitespace_insensitively():
    batch = [entry("Lipid Panel"), entry("  lipid panel "), entry("LIPID PANEL")]
    groups = group_by_test_name(batch)
    assert list(groups) == ["lipid panel"]
    assert len(groups["lipid panel"]) == 3


def test_different_names_never_share_a_test_id(store):
    batch = [entry("CBC"), entry("Lipid Panel"), entry("Thyroid Panel")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert len({e.test_id for e in batch}) == 3


def test_existing_test_id_is_left_alone_and_not_looked_up(store):
    batch = [entry("CBC", test_id="kept-id"), entry("LFT")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert batch[0].test_id == "kept-id"
    assert batch[1].test_id not in ("", "kept-id")


def test_lookup_only_queries_names_without_test_id():
    class RecordingStore(InMemoryCatalogStore):
        async def find_by_name_matching_any(self, patterns):
            self.patterns = patterns
            return await super().find_by_name_matching_any(patterns)

    store = RecordingStore()
    batch = [entry("CBC", test_id="kept-id"), entry(" LFT "), entry("lft")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert store.patterns == ["lft"]


def test_store_is_not_queried_when_every_entry_has_a_test_id(store):
    batch = [entry("CBC", test_id="t-1", component_id="c-1")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert store.calls == []


def test_existing_catalog_test_id_is_reused():
    store = InMemoryCatalogStore([entry("Complete Blood Count", test_id="cbc-id")])
    batch = [entry("complete blood count"), entry("Complete Blood Count ")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert [e.test_id for e in batch] == ["cbc-id", "cbc-id"]


def test_longer_existing_name_is_not_reused_for_shorter_name():
    store = InMemoryCatalogStore([entry("Hemoglobin A1c", test_id="a1c-id")])
    batch = [entry("Hemoglobin")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert batch[0].test_id not in ("", "a1c-id")


def test_missing_component_ids_are_assigned(store):
    batch = [entry("CBC"), entry("CBC"), entry("CBC", component_id="given")]
    asyncio.run(reconcile_master_tests(batch, store))
    assert batch[0].component_id and batch[1].component_id
    assert batch[0].component_id != batch[1].component_id
    assert batch[2].component_id == "given"
    assert batch[0].master_test.component_id == batch[0].component_id


def test_lookup_failure_is_reconciliation_error_and_catalog_untouched():
    old = entry("CBC", test_id="old")
    store = InMemoryCatalogStore([old])
    store.fail_on.add("find")
    with pytest.raises(ReconciliationError, match="find unavailable"):
        asyncio.run(create_master_tests([entry("LFT")], store))
    assert store.calls == ["find"]
    assert old.id in store.documents


def test_upload_replaces_previous_catalog():
    store = InMemoryCatalogStore([entry("Old Test", test_id="old")])
    batch = [entry("CBC"), entry("LFT")]
    asyncio.run(create_master_tests(batch, store))
    assert store.calls == ["find", "clear", "upsert"]
    assert set(store.documents) == {e.id for e in batch}


def test_reupload_keeps_test_ids_stable(store):
    first = [entry("CBC", component_name="Hb"), entry("LFT", component_name="ALT")]
    asyncio.run(create_master_tests(first, store))

    second = [entry("cbc", component_name="Hb"), entry("LFT", component_name="AST")]
    asyncio.run(create_master_tests(second, store))

    assert second[0].test_id == first[0].test_id
    assert second[1].test_id == first[1].test_id
    assert set(store.documents) == {e.id for e in second}


def test_duplicate_ids_in_batch_are_last_write_wins(store):
    first = entry("CBC", id="same", component_name="Hb")
    second = entry("CBC", id="same", component_name="Hct")
    asyncio.run(replace_catalog([first, second], store))
    assert store.documents["same"].component_name == "Hct"


def test_upsert_failure_after_clear_leaves_catalog_empty():
    store = InMemoryCatalogStore([entry("CBC", test_id="old")])
    store.fail_on.add("upsert")
    with pytest.raises(PersistenceError, match="partially replaced"):
        asyncio.run(create_master_tests([entry("LFT")], store))
    assert store.documents == {}


def test_clear_failure_is_persistence_error():
    store = InMemoryCatalogStore()
    store.fail_on.add("clear")
    with pytest.raises(PersistenceError):
        asyncio.run(replace_catalog([entry("CBC")], store))
    assert "upsert" not in store.calls

import json
import re
from typing import Any

from loguru import logger

from lims.modules.master_test.reference_ranges import (
    create_reference_ranges,
    reference_ranges_to_row,
)
from lims.modules.master_test.schema import MasterTestDetails, MasterTestEntry


def _text(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ""


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_ordering(value: Any) -> int:
    # leading integer of the cell ("3.5" -> 3, "2nd" -> 2), else 0
    match = _LEADING_INT_RE.match(value) if isinstance(value, str) else None
    return int(match.group(1)) if match else 0


def parse_interpretation_table(text: str | None) -> Any:
    """JSON payload of an interpretation cell, or [] when it is not one."""
    text = (text or "").strip()
    if not text.startswith(("{", "[")):
        return []
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug(f"Interpretation cell is not valid JSON, keeping as text: {exc}")
        return []


def to_master_test_entry(row: dict[str, Any]) -> MasterTestEntry:
    test_id = _text(row, "testId")
    component_id = _text(row, "componentId")
    test_group = _text(row, "testGroup")
    component_name = _text(row, "component")
    result_type = _text(row, "resultType")
    ordering = parse_ordering(row.get("ordering"))

    details = MasterTestDetails(
        result_type=result_type,
        units=_text(row, "units"),
        reference_ranges=create_reference_ranges(row),
        specimen=_text(row, "specimenType"),
        intro=_text(row, "medicineIntro"),
        sample_collection_time=_text(row, "sampleCollectionTime"),
        test_environment_temp=_text(row, "testEnvironmentTemp"),
        methodology=_text(row, "methodology"),
        calculation_formulae=_text(row, "calculationFormula"),
        test_id=test_id,
        component_id=component_id,
        test_group=test_group,
        component_name=component_name,
        derivation_type=_text(row, "derivationType"),
        ordering=ordering,
    )

    raw_interpretation = _text(row, "patientFriendlyInterpretation")
    table = parse_interpretation_table(raw_interpretation)
    if isinstance(table, list) and table:
        details.interpretation = table
    else:
        details.patient_friendly_interpretation = raw_interpretation

    return MasterTestEntry(
        name=_text(row, "testName"),
        component_name=component_name,
        master_test=details,
        test_id=test_id,
        component_id=component_id,
        test_group=test_group,
        ordering=ordering,
        type=result_type,
    )


def to_csv_row(entry: MasterTestEntry) -> dict[str, Any]:
    """Canonical row fields for an entry, keyed like `iter_csv_rows` output."""
    details = entry.master_test
    interpretation = details.patient_friendly_interpretation or ""
    if details.interpretation:
        interpretation = json.dumps(details.interpretation, ensure_ascii=False)
    return {
        "testName": entry.name,
        "component": entry.component_name,
        "resultType": details.result_type,
        "units": details.units,
        **reference_ranges_to_row(details.reference_ranges),
        "specimenType": details.specimen,
        "medicineIntro": details.intro,
        "sampleCollectionTime": details.sample_collection_time,
        "testEnvironmentTemp": details.test_environment_temp,
        "methodology": details.methodology,
        "patientFriendlyInterpretation": interpretation,
        "calculationFormula": details.calculation_formulae,
        "testId": entry.test_id,
        "componentId": entry.component_id,
        "testGroup": entry.test_group,
        "derivationType": details.derivation_type,
        "ordering": str(entry.ordering),
    }

from typing import Any

from lims.modules.master_test.schema import ReferenceRange, UserType

# (population, lower field, upper field), in the order populations are checked
POPULATION_FIELDS: list[tuple[UserType, str, str]] = [
    (UserType.ADULT_MALE,        "adultMaleLow",        "adultMaleHi"),
    (UserType.ADULT_FEMALE,      "adultFemaleLow",      "adultFemaleHi"),
    (UserType.NEWBORN,           "newbornLow",          "newbornHi"),
    (UserType.INFANT,            "infantLow",           "infantHi"),
    (UserType.TODDLER,           "toddlerLow",          "toddlerHi"),
    (UserType.CHILD,             "childLow",            "childHi"),
    (UserType.ADOLESCENT_MALE,   "adolescentMaleLow",   "adolescentMaleHi"),
    (UserType.ADOLESCENT_FEMALE, "adolescentFemaleLow", "adolescentFemaleHi"),
    (UserType.ADOLESCENT,        "adolescentLow",       "adolescentHi"),
    (UserType.GERIATRIC,         "geriatricLow",        "geriatricHi"),
]


def _limit(value: Any) -> str:
    return value if isinstance(value, str) else ""


def create_reference_ranges(row: dict[str, Any]) -> list[ReferenceRange]:
    ranges: list[ReferenceRange] = []
    for user_type, low_field, hi_field in POPULATION_FIELDS:
        lower = _limit(row.get(low_field))
        upper = _limit(row.get(hi_field))
        if lower.strip() or upper.strip():
            ranges.append(
                ReferenceRange(lower_limit=lower, upper_limit=upper, user_type=user_type)
            )
    return ranges


def reference_ranges_to_row(ranges: list[ReferenceRange]) -> dict[str, str]:
    """Inverse of `create_reference_ranges`: every low/hi field, "" when unset."""
    fields = {user_type: (low, hi) for user_type, low, hi in POPULATION_FIELDS}
    row = {field: "" for pair in fields.values() for field in pair}
    for reference_range in ranges:
        low_field, hi_field = fields[reference_range.user_type]
        row[low_field] = reference_range.lower_limit
        row[hi_field] = reference_range.upper_limit
    return row

import re

# mapping: {spreadsheet header label → canonical row field}
CSV_COLUMN_MAPPING: dict[str, str] = {
    "Test Group":                    "testGroup",
    "Test Name":                     "testName",
    "Component":                     "component",
    "Result Type":                   "resultType",
    "Units":                         "units",
    "Adult Male Lower Limit":        "adultMaleLow",
    "Adult Male Upper Limit":        "adultMaleHi",
    "Adult Female Lower Limit":      "adultFemaleLow",
    "Adult Female Upper Limit":      "adultFemaleHi",
    "Newborn Lower Limit":           "newbornLow",
    "Newborn Upper Limit":           "newbornHi",
    "Infant Lower Limit":            "infantLow",
    "Infant Upper Limit":            "infantHi",
    "Toddler Lower Limit":           "toddlerLow",
    "Toddler Upper Limit":           "toddlerHi",
    "Child Lower Limit":             "childLow",
    "Child Upper Limit":             "childHi",
    "Adolescent Male Lower Limit":   "adolescentMaleLow",
    "Adolescent Male Upper Limit":   "adolescentMaleHi",
    "Adolescent Female Lower Limit": "adolescentFemaleLow",
    "Adolescent Female Upper Limit": "adolescentFemaleHi",
    "Adolescent Lower Limit":        "adolescentLow",
    "Adolescent Upper Limit":        "adolescentHi",
    "Geriatric Lower Limit":         "geriatricLow",
    "Geriatric Upper Limit":         "geriatricHi",
    "Type of Specimen":              "specimenType",
    "Medicine Introduction":         "medicineIntro",
    "Time of Sample Collection":     "sampleCollectionTime",
    "Test Environment Temperature":  "testEnvironmentTemp",
    "Methodology":                   "methodology",
    "Patient-Friendly Interpretation": "patientFriendlyInterpretation",
    "Calculation formulae":          "calculationFormula",
    "Test ID":                       "testId",
    "Component ID":                  "componentId",
    "Derivation Type":               "derivationType",
    "Ordering":                      "ordering",
}

# column order of an exported catalog sheet
CSV_HEADER: list[str] = [
    "Test Name",
    "Component",
    "Result Type",
    "Units",
    "Adult Male Lower Limit",
    "Adult Male Upper Limit",
    "Adult Female Lower Limit",
    "Adult Female Upper Limit",
    "Newborn Lower Limit",
    "Newborn Upper Limit",
    "Infant Lower Limit",
    "Infant Upper Limit",
    "Toddler Lower Limit",
    "Toddler Upper Limit",
    "Child Lower Limit",
    "Child Upper Limit",
    "Adolescent Male Lower Limit",
    "Adolescent Male Upper Limit",
    "Adolescent Female Lower Limit",
    "Adolescent Female Upper Limit",
    "Adolescent Lower Limit",
    "Adolescent Upper Limit",
    "Geriatric Lower Limit",
    "Geriatric Upper Limit",
    "Type of Specimen",
    "Medicine Introduction",
    "Time of Sample Collection",
    "Test Environment Temperature",
    "Methodology",
    "Patient-Friendly Interpretation",
    "Calculation formulae",
    "Test ID",
    "Component ID",
    "Ordering",
]

_WHITESPACE_RE = re.compile(r"\s+")


def map_header(header: str) -> str:
    """Canonical field name for a spreadsheet header.

    Unknown headers fall back to a slug: lower-cased, whitespace runs → "_".
    """
    mapped = CSV_COLUMN_MAPPING.get(header)
    if mapped:
        return mapped
    return _WHITESPACE_RE.sub("_", header.lower())

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserType(str, Enum):
    ADULT_MALE = "ADULT_MALE"
    ADULT_FEMALE = "ADULT_FEMALE"
    NEWBORN = "NEWBORN"
    INFANT = "INFANT"
    TODDLER = "TODDLER"
    CHILD = "CHILD"
    ADOLESCENT = "ADOLESCENT"
    ADOLESCENT_MALE = "ADOLESCENT_MALE"
    ADOLESCENT_FEMALE = "ADOLESCENT_FEMALE"
    GERIATRIC = "GERIATRIC"


class ReferenceRange(BaseModel):
    lower_limit: str = Field("", description="Lower bound text, empty if absent")
    upper_limit: str = Field("", description="Upper bound text, empty if absent")
    user_type: UserType = Field(..., description="Population the bounds apply to")


class MasterTestDetails(BaseModel):
    result_type: str = ""
    units: str = ""
    reference_ranges: list[ReferenceRange] = Field(default_factory=list)
    specimen: str = ""
    intro: str = ""
    sample_collection_time: str = ""
    test_environment_temp: str = ""
    methodology: str = ""
    calculation_formulae: str = ""
    test_id: str = ""
    component_id: str = ""
    test_group: str = ""
    component_name: str = ""
    derivation_type: str = ""
    ordering: int = 0

    # exactly one of these two is set
    interpretation: list[Any] | None = Field(
        None, description="Structured interpretation table parsed from JSON"
    )
    patient_friendly_interpretation: str | None = Field(
        None, description="Free-text interpretation when no table was given"
    )


class MasterTestSchemaBase(BaseModel):
    name: str = Field("", description="Display name of the test")
    component_name: str = Field("", description="Analyte within the test")
    master_test: MasterTestDetails = Field(default_factory=MasterTestDetails)
    test_id: str = Field(
        "", description="Shared by every entry of the same logical test"
    )
    component_id: str = Field("", description="Identity of the component")
    test_group: str = Field("", description="Free text grouping label")
    ordering: int = Field(0, description="Sort key within the test group")
    type: str = Field("", description="Result type, duplicated for listing")


class MasterTestEntry(MasterTestSchemaBase):
    id: str = Field(default_factory=lambda: str(uuid4()))


class MasterTestSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    test_id: str
    component_name: str
    test_group: str


class MasterTestUploadResponse(BaseModel):
    success: bool
    message: str
    data: list[MasterTestSummary] = Field(default_factory=list)


class MasterTestListResponse(BaseModel):
    success: bool
    count: int
    data: list[MasterTestSummary] = Field(default_factory=list)


def to_master_test_summary(entry: MasterTestSchemaBase) -> MasterTestSummary:
    return MasterTestSummary(
        name=entry.name,
        test_id=entry.test_id,
        component_name=entry.component_name,
        test_group=entry.test_group,
    )

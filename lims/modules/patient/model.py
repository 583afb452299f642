from datetime import datetime, timezone

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel

from lims.modules.patient.schema import PatientResponse, PatientSchemaBase


class Patient(Document, PatientSchemaBase):
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "patients"
        indexes = [IndexModel([("sample_id", ASCENDING)], unique=True)]


def to_patient_response(patient: Patient) -> PatientResponse:
    return PatientResponse(
        id=str(patient.id),
        **patient.model_dump(exclude={"id", "revision_id"}),
    )

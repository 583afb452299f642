from beanie import PydanticObjectId
from fastapi import HTTPException
from loguru import logger
from pymongo.errors import DuplicateKeyError

from lims.modules.patient.model import Patient, to_patient_response
from lims.modules.patient.schema import PatientCreateRequest, PatientResponse


def _already_registered(sample_id: str) -> HTTPException:
    logger.warning(f"Patient with sample_id={sample_id} already exists")
    return HTTPException(400, f"Sample {sample_id} is already registered")


async def add_patient(request: PatientCreateRequest) -> PatientResponse:
    existing = await Patient.find_one(Patient.sample_id == request.sample_id)
    if existing:
        raise _already_registered(request.sample_id)
    patient = Patient(**request.model_dump())
    try:
        await patient.insert()
    except DuplicateKeyError as exc:
        # a concurrent registration won the unique sample_id index
        raise _already_registered(request.sample_id) from exc
    logger.info(f"Registered patient {patient.id} for sample {patient.sample_id}")
    return to_patient_response(patient)


async def get_all_patients() -> list[PatientResponse]:
    patients = await Patient.find_all().sort(-Patient.created_at).to_list()
    logger.info(f"Found {len(patients)} patients.")
    return [to_patient_response(patient) for patient in patients]


async def get_patient_by_id(patient_id: str) -> PatientResponse:
    if not PydanticObjectId.is_valid(patient_id):
        raise HTTPException(400, f"Invalid patient id: {patient_id}")
    patient = await Patient.get(PydanticObjectId(patient_id))
    if not patient:
        raise HTTPException(404, "Patient not found")
    return to_patient_response(patient)

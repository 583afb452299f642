from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import asynccontextmanager
from fastapi.responses import JSONResponse
from loguru import logger

from lims.infrastructure.database import init_db
from lims.modules.lab.schema import LabCreateRequest, LabCreateResponse
from lims.modules.lab.service import add_lab
from lims.modules.master_test.errors import MasterTestUploadError
from lims.modules.master_test.schema import (
    MasterTestListResponse,
    MasterTestUploadResponse,
    to_master_test_summary,
)
from lims.modules.master_test.store import BeanieCatalogStore, CatalogStore
from lims.modules.master_test.upload import list_master_tests, upload_master_tests
from lims.modules.patient.schema import (
    PatientCreateRequest,
    PatientCreateResponse,
    PatientListResponse,
)
from lims.modules.patient.service import (
    add_patient,
    get_all_patients,
    get_patient_by_id,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="LIMS Service", lifespan=lifespan)


def get_catalog_store() -> CatalogStore:
    return BeanieCatalogStore()


@app.exception_handler(MasterTestUploadError)
async def master_test_upload_error_handler(
    request: Request, exc: MasterTestUploadError
) -> JSONResponse:
    logger.error(f"{request.url.path} failed with {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
    )


@app.get("/")
async def root():
    return {"message": "Welcome to the LIMS Service!"}


# ================ MASTER TESTS ====================


@app.post("/api/master-tests/upload")
async def upload_master_tests_handler(
    file: UploadFile | None = File(None),
    store: CatalogStore = Depends(get_catalog_store),
) -> MasterTestUploadResponse:
    filename = file.filename if file else None
    buffer = await file.read() if file else b""
    return await upload_master_tests(filename, buffer, store)


@app.get("/api/master-tests")
async def list_master_tests_handler(
    store: CatalogStore = Depends(get_catalog_store),
) -> MasterTestListResponse:
    entries = await list_master_tests(store)
    return MasterTestListResponse(
        success=True,
        count=len(entries),
        data=[to_master_test_summary(entry) for entry in entries],
    )


# ================ PATIENTS ====================


@app.post("/api/patients/add", status_code=201)
async def add_patient_handler(
    request: PatientCreateRequest,
) -> PatientCreateResponse:
    return PatientCreateResponse(success=True, data=await add_patient(request))


@app.get("/api/patients/all")
async def get_all_patients_handler() -> PatientListResponse:
    patients = await get_all_patients()
    return PatientListResponse(success=True, count=len(patients), data=patients)


@app.get("/api/patients/{patient_id}")
async def get_patient_handler(patient_id: str) -> PatientCreateResponse:
    return PatientCreateResponse(success=True, data=await get_patient_by_id(patient_id))


# ================ LABS ====================


@app.post("/api/labs/")
async def add_lab_handler(request: LabCreateRequest) -> LabCreateResponse:
    lab = await add_lab(request)
    return LabCreateResponse(success=True, message="Lab created", data=lab)

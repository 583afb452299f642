from loguru import logger

from lims.modules.lab.model import Lab, to_lab_response
from lims.modules.lab.schema import LabCreateRequest, LabResponse


async def add_lab(request: LabCreateRequest) -> LabResponse:
    # credentials belong to the auth service, never stored on the lab
    lab = Lab(**request.model_dump(exclude={"password"}), tests=[], lab_tests=[])
    await lab.insert()
    logger.info(f"Created lab {lab.id} (local_id={lab.local_id})")
    return to_lab_response(lab)

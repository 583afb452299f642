from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from beanie import Document
from pydantic import Field

from lims.modules.lab.schema import LabResponse, LabSchemaBase


class Lab(Document, LabSchemaBase):
    id: str = Field(default_factory=lambda: str(uuid4()))
    tests: list[Any] = Field(default_factory=list)
    lab_tests: list[Any] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "labs"


def to_lab_response(lab: Lab) -> LabResponse:
    return LabResponse(**lab.model_dump(include=set(LabResponse.model_fields)))

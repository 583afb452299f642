from typing import Any

from pydantic import BaseModel, Field


class LabSchemaBase(BaseModel):
    local_id: str = Field(..., description="Lab identifier local to the head office")
    head_id: str | None = None
    name: str | None = None
    address: str | None = None
    pin_code: str | None = None
    poc: str | None = Field(None, description="Point of contact")
    phone_number: str | None = None
    email: str | None = None
    plan: str | None = None
    sign_url: str | None = None
    amount_lost: Any = None
    amount_pending: Any = None


class LabCreateRequest(LabSchemaBase):
    password: str | None = None


class LabResponse(LabSchemaBase):
    id: str
    tests: list[Any] = Field(default_factory=list)
    lab_tests: list[Any] = Field(default_factory=list)


class LabCreateResponse(BaseModel):
    success: bool
    message: str
    data: LabResponse

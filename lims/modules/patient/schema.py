from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PaymentMode(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class OrderedTest(BaseModel):
    id: str = Field(..., description="Identifier of the ordered test")
    name: str = Field(..., description="Name of the ordered test")
    price: float = Field(..., description="Price charged for the test")
    sub: str = Field(..., description="Sub-category of the test")


class PatientSchemaBase(BaseModel):
    sample_id: str = Field(..., description="Unique sample identifier")
    organization: str
    register: datetime
    sample_collected: datetime
    approved_on: datetime
    name: str
    phone_number: str
    age: int
    gender: Gender
    referred_by: str
    tests: list[OrderedTest] = Field(default_factory=list)
    advance_payment: float
    advance_payment_mode: PaymentMode
    total_price: float
    payment_status: PaymentStatus = PaymentStatus.PENDING
    discount: float = 0


class PatientCreateRequest(PatientSchemaBase):
    pass


class PatientResponse(PatientSchemaBase):
    id: str
    created_at: datetime


class PatientCreateResponse(BaseModel):
    success: bool
    data: PatientResponse


class PatientListResponse(BaseModel):
    success: bool
    count: int
    data: list[PatientResponse]

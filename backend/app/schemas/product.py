from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ProductCreate(BaseModel):
    name: str
    price: float


class ProductUpdate(BaseModel):
    name: str
    price: float
    availability: bool


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    availability: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    data: ProductOut


class ProductListResponse(BaseModel):
    data: list[ProductOut]


class MessageResponse(BaseModel):
    data: str


class ErrorResponse(BaseModel):
    error: str


class ValidationErrorResponse(BaseModel):
    errors: list[dict]

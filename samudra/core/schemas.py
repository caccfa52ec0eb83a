"""
Shared Pydantic building blocks: camelCase wire format and the response envelope.
"""
from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys, serializes as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""
    status: str = "success"
    data: T


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope."""
    status: str = "error"
    error: ErrorDetail


class MessageData(BaseModel):
    message: str


class ExistsData(BaseModel):
    exists: bool


def success(data) -> dict:
    """Wrap route output in the success envelope; validated by the route's response_model."""
    return {"status": "success", "data": data}

"""
Response envelope shared by every service operation.

The payload is nullable; the status code and a human-readable message are
always present.
"""

from enum import IntEnum
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiStatusCode(IntEnum):
    SUCCESS = 200
    CREATED = 201
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


class ApiResponse(BaseModel, Generic[T]):
    data: Optional[T] = None
    status_code: ApiStatusCode = ApiStatusCode.SUCCESS
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status_code in (ApiStatusCode.SUCCESS, ApiStatusCode.CREATED)

    @classmethod
    def success(cls, data: T, message: str = "Operation completed successfully",
                status_code: ApiStatusCode = ApiStatusCode.SUCCESS) -> "ApiResponse[T]":
        return cls(data=data, status_code=status_code, message=message)

    @classmethod
    def error(cls, status_code: ApiStatusCode, message: str) -> "ApiResponse[T]":
        return cls(data=None, status_code=status_code, message=message)

"""API error type

Use cases report failures as libs.result.Error; routes raise ClientError
to turn them into {"error": {"code", "message"}} responses.
"""

from typing import Any, Dict
from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

# Codes not listed map to 400
ERROR_STATUS_CODES = {
    "SUBSCRIPTION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "PRODUCT_UNAVAILABLE": status.HTTP_409_CONFLICT,
    "SUBSCRIPTION_CLOSED": status.HTTP_409_CONFLICT,
    "GENERATION_DISABLED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "REPOSITORY_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "SUBSCRIPTION_CREATE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "SUBSCRIPTION_UPDATE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "ORDER_CREATE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "ORDER_UPDATE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.error = error
        self.status_code = status_code
        super().__init__(error.message)

    @classmethod
    def from_error(cls, error: Error) -> "ClientError":
        return cls(error, status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST))

    def to_content(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            body["reason"] = self.error.reason
        return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())

# app_catalog/helper/response_helper.py
from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def send_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = 200,
) -> JSONResponse:
    """Standard success envelope"""
    payload = {
        "success": True,
        "message": message,
        "data": jsonable_encoder(data, by_alias=True)
    }
    return JSONResponse(status_code=status_code, content=payload)


def send_error(
    message: str = "An error occurred",
    status_code: int = 400,
    errors: Optional[Any] = None
) -> JSONResponse:
    """Send an error response"""
    content = {
        "success": False,
        "message": message
    }
    if errors is not None:
        content["errors"] = errors

    return JSONResponse(
        status_code=status_code,
        content=content
    )

"""
Standard JSON envelope for every response:

    {"meta": {"success": bool, "message": str}, "data": ..., "details": ...}
"""

from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse


def _envelope(success: bool, message: str) -> dict:
    return {"meta": {"success": success, "message": message}}


def success_response(message: str, data: Any = None) -> JSONResponse:
    body = _envelope(True, message)
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=200, content=body)


def error_response(
    message: str,
    status_code: int,
    details: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body = _envelope(False, message)
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=dict(headers) if headers else None)

"""
JSON response writer with permissive CORS headers.
"""

from typing import Any

from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def json_response(status_code: int, payload: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload, headers=CORS_HEADERS)


def error_response(status_code: int, message: str) -> JSONResponse:
    return json_response(status_code, {"status": "error", "message": message})

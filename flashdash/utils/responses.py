"""
Response envelopes.

Success bodies share the failure envelope's `status`/`status_code`/`message`
keys; endpoint payload keys sit at the top level beside them.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(
    status_code: int = 200,
    message: str = "OK",
    data: Optional[Any] = None,
    **payload: Any,
) -> JSONResponse:
    content: dict[str, Any] = {
        "status": "success",
        "status_code": status_code,
        "message": message,
    }
    if data is not None:
        content["data"] = data
    content.update(payload)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def auth_response(
    token: str,
    user: dict[str, Any],
    status_code: int = 200,
    message: str = "Login successful",
) -> JSONResponse:
    """Login body: `{token, user}` inside the success envelope."""
    return success_response(
        status_code=status_code,
        message=message,
        token=token,
        user=user,
    )

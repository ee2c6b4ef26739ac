"""
Response body helpers.

The storefront client expects a flat body with the HTTP status repeated as a
string:
- Success: { "status_code": "200", ...payload }
- Error:   { "status_code": "404", "error_message" | "status_message": "..." }
"""
from typing import Any


def status_body(status_code: int, **payload: Any) -> dict[str, Any]:
    """
    Build a flat response body carrying ``status_code`` as a string.

    Args:
        status_code: HTTP status of the response
        payload: Extra top-level keys

    Returns:
        dict: { "status_code": "<code>", **payload }
    """
    return {"status_code": str(status_code), **payload}


def error_body(status_code: int, message: str, message_key: str = "error_message") -> dict[str, Any]:
    """Error body: { "status_code": "<code>", <message_key>: <message> }."""
    return status_body(status_code, **{message_key: message})

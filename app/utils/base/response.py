from typing import Any


def envelope(data: Any = None, message: str | None = None, count: int | None = None) -> dict:
    """Wrap a successful result in the `{success, data, message, count}` shape."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str, error: str | None = None) -> dict:
    return {"success": False, "message": message, "error": error}

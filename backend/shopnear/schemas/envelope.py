"""Response Envelope — uniform {success, message, data} body for successful calls.

Invariants:
    - success is always True here; failures use ShopNearError.to_response()
    - data is omitted when None
"""

from typing import Any


def envelope(message: str, data: Any = None) -> dict:
    body: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body

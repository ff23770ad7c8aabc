"""
JSON response envelopes.

Every API response is ``{"success": bool, "message"?: str, "data"?: any}``.
"""

from typing import Any

from aiohttp import web


def success_response(
    data: Any = None, message: str | None = None, status: int = 200
) -> web.Response:
    """Build a success envelope."""
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return web.json_response(body, status=status)


def error_response(message: str, status: int) -> web.Response:
    """Build an error envelope."""
    return web.json_response(
        {"success": False, "message": message}, status=status
    )

"""Request ID middleware.

Forwards a client X-Request-ID (or mints one) and echoes it on the response
so a trigger call can be matched to the automation log lines it caused.
Raw ASGI, so streaming responses and background tasks are unaffected.
"""

import re
from typing import Callable

from donorcrm.shared.utils.generators import generate_cuid

REQUEST_ID_MAX_LENGTH = 64
# Alphanumeric, hyphen, underscore only; anything else is replaced (log injection).
_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$")


def _header_value(scope: dict, name: str) -> str | None:
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return the client value when safe to log, otherwise a fresh id."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return generate_cuid()


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Wrap an ASGI app; stores the id in scope state and adds it to responses."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_header(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_name.encode(), request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_header)

    return asgi_app

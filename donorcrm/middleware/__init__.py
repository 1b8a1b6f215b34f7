"""ASGI middleware."""

from donorcrm.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]

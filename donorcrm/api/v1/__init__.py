"""API version 1."""

from donorcrm.api.v1.router import api_router

__all__ = ["api_router"]

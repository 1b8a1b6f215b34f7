"""Shared telemetry: logging setup."""

from donorcrm.shared.telemetry.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]

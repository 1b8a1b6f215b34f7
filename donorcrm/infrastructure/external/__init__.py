"""External integrations (outbound channel providers)."""

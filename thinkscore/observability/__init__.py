"""Observability layer - structured logging."""

from thinkscore.observability.logging import bind_context, clear_context, log_context, setup_logging

__all__ = ["setup_logging", "bind_context", "clear_context", "log_context"]

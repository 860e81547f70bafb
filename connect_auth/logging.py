"""
Structured logging configuration for Connect authentication.
"""

import sys
import structlog
import logging
from typing import Any, Dict, Optional
from contextvars import ContextVar, Token

# Context variable for the installation being verified
client_key_var: ContextVar[Optional[str]] = ContextVar('client_key', default=None)


def configure_logging(log_level: str = "info") -> None:
    """Configure structured logging for an application embedding the library."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the current client key to log events."""
    client_key = client_key_var.get()
    if client_key and "client_key" not in event_dict:
        event_dict["client_key"] = client_key

    return event_dict


def set_client_key(client_key: Optional[str]) -> Token:
    """Set the client key in logging context."""
    return client_key_var.set(client_key or None)


def reset_client_key(token: Token) -> None:
    """Restore the client key that was set before the matching set_client_key call."""
    client_key_var.reset(token)


def clear_context():
    """Clear all context variables."""
    client_key_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)

"""
Structured Logging Setup
========================
structlog configuration for applications using the client.

Usage:
    from resilient_http.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_output=False)
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Any, Dict, Mapping

import httpx
import structlog
from structlog.typing import EventDict

CREDENTIAL_HEADERS = frozenset({
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
})

CREDENTIAL_PARAMS = frozenset({
    "api_key",
    "apikey",
    "access_token",
    "token",
    "signature",
})

MASK = "REDACTED"


def _mask_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        name: MASK if name.lower() in CREDENTIAL_HEADERS else value
        for name, value in headers.items()
    }


def _mask_url(url: str) -> str:
    parsed = httpx.URL(url)
    params = parsed.params.multi_items()
    if not any(name.lower() in CREDENTIAL_PARAMS for name, _ in params):
        return url
    masked = [
        (name, MASK if name.lower() in CREDENTIAL_PARAMS else value)
        for name, value in params
    ]
    return str(parsed.copy_with(params=masked))


def mask_credentials(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Mask credentials in logged HTTP fields.

    Top-level fields named like a credential header, mappings under any
    ``*headers`` key and credential query parameters in ``url`` are replaced
    with ``REDACTED``.
    """
    for key, value in event_dict.items():
        name = key.lower()
        if name in CREDENTIAL_HEADERS:
            event_dict[key] = MASK
        elif name.endswith("headers") and isinstance(value, Mapping):
            event_dict[key] = _mask_headers(value)
        elif name == "url" and isinstance(value, str):
            event_dict[key] = _mask_url(value)
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, colourless console output otherwise
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        mask_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # The transport's own events cover what httpx/httpcore would log
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str):
    """Get a structured logger instance."""
    return structlog.get_logger(name)

"""
Resilient HTTP - Logging
========================
Body-preserving logging transport and structlog setup.
"""

from .transport import LoggingTransport
from .setup import configure_logging, get_logger, mask_credentials

__all__ = [
    "LoggingTransport",
    "configure_logging",
    "get_logger",
    "mask_credentials",
]

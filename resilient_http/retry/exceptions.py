"""
Retry Exceptions
================
Exception classes for retry operations.
"""


class OperationCancelled(Exception):
    """Raised when a cancel event interrupts a wait or an in-flight call."""
    pass

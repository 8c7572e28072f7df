"""Core exception taxonomy and recoverable-error logging policy."""

from __future__ import annotations

import logging
from typing import TypeAlias


class ImcoreError(RuntimeError):
    """Base class for errors raised by the reconciliation core."""


class ProtocolError(ImcoreError):
    """Frame or scope protocol was violated by the caller."""


class InvalidFrameStateError(ProtocolError):
    """begin_frame/end_frame called in the wrong controller phase."""

    def __init__(self, operation: str, phase: str) -> None:
        super().__init__(f"{operation} is not allowed while {phase}")
        self.operation = operation
        self.phase = phase


class UnbalancedScopeError(ProtocolError):
    """A push/pop pair on the id, clip or layout stack did not match."""


# Exceptions a frame hook may raise without taking down the frame.
RecoverableRuntimeErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_RUNTIME_ERRORS: RecoverableRuntimeErrors = (
    RuntimeError,
    ValueError,
    TypeError,
    AttributeError,
    KeyError,
    LookupError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)

"""Exceptions and error sinks for stencil.

Compile-time errors (`NoConcatenationError`, expression syntax errors) are
raised to the caller. Render-time errors are wrapped in `InterpolationError`
and handed to an `ErrorSink`; rendering itself never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StencilError(Exception):
    """Base exception for all stencil errors."""

    code: str = "error"


class ConfigurationError(StencilError):
    """Raised when configuration is changed after the setup phase."""

    code = "config"


class NoConcatenationError(StencilError):
    """Raised when a trusted context is requested for a multi-part template."""

    code = "noconcat"

    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Error while interpolating: {text}\n"
            "Strict Contextual Escaping disallows interpolations that concatenate multiple "
            "expressions when a trusted value is required."
        )


class UntrustedValueError(StencilError):
    """Raised when a value is not approved for the requested trust category."""

    code = "unsafe"

    def __init__(self, category: Any, value: Any):
        self.category = category
        self.value = value
        super().__init__(f"Attempting to use an unsafe value in a safe context ({category}): {value!r}")


class InterpolationError(StencilError):
    """Wraps any error raised while rendering a compiled template."""

    code = "interr"

    def __init__(self, text: str, cause: BaseException):
        self.text = text
        self.cause = cause
        super().__init__(f"Can't interpolate: {text}\n{type(cause).__name__}: {cause}")


class ErrorSink(Protocol):
    def report(self, error: BaseException) -> None: ...


class LoggingErrorSink:
    """Default sink: log the error with its traceback and carry on."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def report(self, error: BaseException) -> None:
        self.log.error("%s", error, exc_info=(type(error), error, error.__traceback__))


class CollectingErrorSink:
    """Keep reported errors in memory, e.g. to inspect after a batch of renders."""

    def __init__(self) -> None:
        self.errors: list[BaseException] = []

    def report(self, error: BaseException) -> None:
        self.errors.append(error)

    def clear(self) -> None:
        self.errors.clear()

"""stencil - compile text templates with embedded expressions into render functions."""

from .config import DelimiterConfig, StencilConfig, load_config
from .errors import (
    CollectingErrorSink,
    ConfigurationError,
    ErrorSink,
    InterpolationError,
    LoggingErrorSink,
    NoConcatenationError,
    StencilError,
    UntrustedValueError,
)
from .coerce import stringify
from .interpolate import CompiledTemplate, Interpolator
from .jinja import JinjaExpressionEngine
from .trust import TrustCategory, TrustedValue, TrustPolicy
from .types import ExpressionSegment, LiteralSegment, Segment

__all__ = [
    "CollectingErrorSink",
    "CompiledTemplate",
    "ConfigurationError",
    "DelimiterConfig",
    "ErrorSink",
    "ExpressionSegment",
    "InterpolationError",
    "Interpolator",
    "JinjaExpressionEngine",
    "LiteralSegment",
    "LoggingErrorSink",
    "NoConcatenationError",
    "Segment",
    "StencilConfig",
    "StencilError",
    "TrustCategory",
    "TrustPolicy",
    "TrustedValue",
    "UntrustedValueError",
    "load_config",
    "stringify",
]

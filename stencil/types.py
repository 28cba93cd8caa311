from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Union


class CompiledExpression(Protocol):
    """Callable produced by an expression engine.

    - source: the expression text it was compiled from, kept for diagnostics
    """
    source: str

    def __call__(self, context: Mapping[str, Any] | None) -> Any: ...


@dataclass(frozen=True)
class LiteralSegment:
    """Plain text copied to the output as-is."""
    text: str


@dataclass(frozen=True)
class ExpressionSegment:
    """An embedded expression evaluated against the render context.

    - deferred: found between the secondary delimiters, compiled so that
      pending (future) values are resolved while evaluating
    """
    compiled: CompiledExpression
    source: str
    deferred: bool = False


Segment = Union[LiteralSegment, ExpressionSegment]

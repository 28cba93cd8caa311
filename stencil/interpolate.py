from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .coerce import stringify
from .config import DelimiterConfig, StencilConfig
from .errors import ErrorSink, InterpolationError, LoggingErrorSink, NoConcatenationError
from .jinja import JinjaExpressionEngine
from .trust import TrustCategory, TrustPolicy
from .types import ExpressionSegment, LiteralSegment, Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledTemplate:
    """A template split into segments, ready to be rendered against contexts.

    Calling the template renders it. Rendering never raises: errors are
    reported to the error sink and the call returns None.
    """
    source: str
    segments: tuple[Segment, ...]
    has_expression: bool
    trusted_context: TrustCategory | None = None
    trust_policy: TrustPolicy = field(default_factory=TrustPolicy, repr=False, compare=False)
    error_sink: ErrorSink = field(default_factory=LoggingErrorSink, repr=False, compare=False)

    @property
    def expressions(self) -> list[str]:
        return [s.source for s in self.segments if isinstance(s, ExpressionSegment)]

    def render(self, context: Mapping[str, Any] | None = None) -> str | None:
        try:
            parts: list[str] = []
            for segment in self.segments:
                if isinstance(segment, LiteralSegment):
                    parts.append(segment.text)
                    continue
                value = segment.compiled(context)
                if self.trusted_context is not None:
                    value = self.trust_policy.get_trusted(self.trusted_context, value)
                else:
                    value = self.trust_policy.unwrap(value)
                parts.append(stringify(value))
            return "".join(parts)
        except Exception as err:
            error = InterpolationError(self.source, err)
            error.__cause__ = err
            self.error_sink.report(error)
            return None

    __call__ = render


@dataclass
class Interpolator:
    """Compile template strings with embedded expressions into CompiledTemplates.

    Text between the primary delimiters is a plain expression. Text between
    the secondary delimiters, outside any primary pair, is a deferred
    expression whose pending values are resolved while rendering.
    """
    delimiters: DelimiterConfig = field(default_factory=DelimiterConfig)
    engine: JinjaExpressionEngine = field(default_factory=JinjaExpressionEngine)
    trust_policy: TrustPolicy = field(default_factory=TrustPolicy)
    error_sink: ErrorSink = field(default_factory=LoggingErrorSink)

    def __post_init__(self) -> None:
        self.delimiters.freeze()

    @classmethod
    def from_config(cls, config: StencilConfig | None = None, error_sink: ErrorSink | None = None) -> Interpolator:
        """Wire an Interpolator with the engine, trust policy and sink described by 'config'."""
        config = config or StencilConfig()
        engine = JinjaExpressionEngine(
            strict_undefined=config.expressions.strict_undefined,
            resolve_async=config.expressions.resolve_async,
            log_warnings=config.expressions.log_warnings,
        )
        return cls(
            delimiters=config.delimiters,
            engine=engine,
            trust_policy=TrustPolicy(config.trust.resource_url_allowlist),
            error_sink=error_sink or LoggingErrorSink(),
        )

    @property
    def start_symbol(self) -> str:
        return self.delimiters.get_primary_start()

    @property
    def end_symbol(self) -> str:
        return self.delimiters.get_primary_end()

    @property
    def secondary_start_symbol(self) -> str:
        return self.delimiters.get_secondary_start()

    @property
    def secondary_end_symbol(self) -> str:
        return self.delimiters.get_secondary_end()

    def compile(
        self,
        text: str,
        must_have_expression: bool = False,
        trusted_context: TrustCategory | str | None = None,
    ) -> CompiledTemplate | None:
        """Compile 'text' into a CompiledTemplate.

        - must_have_expression: return None when 'text' has no expression
        - trusted_context: each render passes the value through the trust
          policy for that category; the template must then consist of a
          single segment, otherwise NoConcatenationError is raised

        Expression syntax errors raised by the engine propagate.
        """
        category = TrustCategory(trusted_context) if trusted_context else None
        start, end = self.delimiters.get_primary_start(), self.delimiters.get_primary_end()
        segments: list[Segment] = []
        index = 0
        length = len(text)

        while index < length:
            start_index = text.find(start, index)
            end_index = text.find(end, start_index + len(start)) if start_index != -1 else -1
            if start_index == -1 or end_index == -1:
                # No complete pair left; the rest is literal text
                segments.extend(self._split_secondary(text[index:]))
                break
            if index != start_index:
                segments.extend(self._split_secondary(text[index:start_index]))
            source = text[start_index + len(start):end_index]
            segments.append(ExpressionSegment(compiled=self.engine.compile(source), source=source))
            index = end_index + len(end)

        if not segments:
            segments.append(LiteralSegment(""))
        has_expression = any(isinstance(s, ExpressionSegment) for s in segments)

        if category is not None and len(segments) > 1:
            raise NoConcatenationError(text)

        if must_have_expression and not has_expression:
            return None

        logger.debug("Compiled %r into %d segment(s)", text, len(segments))
        return CompiledTemplate(
            source=text,
            segments=tuple(segments),
            has_expression=has_expression,
            trusted_context=category,
            trust_policy=self.trust_policy,
            error_sink=self.error_sink,
        )

    def _split_secondary(self, chunk: str) -> list[Segment]:
        """Split literal text on the secondary delimiters into literal and deferred segments."""
        start, end = self.delimiters.get_secondary_start(), self.delimiters.get_secondary_end()
        segments: list[Segment] = []
        index = 0
        length = len(chunk)
        while index < length:
            start_index = chunk.find(start, index)
            end_index = chunk.find(end, start_index + len(start)) if start_index != -1 else -1
            if start_index == -1 or end_index == -1:
                segments.append(LiteralSegment(chunk[index:]))
                break
            if index != start_index:
                segments.append(LiteralSegment(chunk[index:start_index]))
            source = chunk[start_index + len(start):end_index]
            compiled = self.engine.compile(source, resolve_async=True, log_warnings=False)
            segments.append(ExpressionSegment(compiled=compiled, source=source, deferred=True))
            index = end_index + len(end)
        return segments

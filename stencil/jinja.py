from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Mapping

from jinja2 import ChainableUndefined, Environment, StrictUndefined

"""Jinja2-backed expression engine used by the interpolator.

Environments are created lazily, once per option combination, and reused
across compiles to avoid per-expression construction overhead.
"""

logger = logging.getLogger(__name__)

PENDING_TYPES = (concurrent.futures.Future, asyncio.Future)


def resolve_pending(value: Any, source: str | None = None, log_warnings: bool = False) -> Any:
    """Replace a future by its result.

    A completed future yields its result (or raises its exception); a pending
    or cancelled one yields None. Anything else is returned unchanged.
    """
    if not isinstance(value, PENDING_TYPES):
        return value
    if log_warnings:
        logger.warning("Pending value found in expression `%s`; unwrapping it", source)
    if not value.done() or value.cancelled():
        return None
    return value.result()


class ResolvingEnvironment(Environment):
    """Environment that resolves futures on every attribute and item lookup."""

    log_warnings: bool = False

    def getattr(self, obj: Any, attribute: str) -> Any:
        obj = resolve_pending(obj, attribute, self.log_warnings)
        return resolve_pending(super().getattr(obj, attribute), attribute, self.log_warnings)

    def getitem(self, obj: Any, argument: Any) -> Any:
        obj = resolve_pending(obj, argument, self.log_warnings)
        return resolve_pending(super().getitem(obj, argument), argument, self.log_warnings)


class JinjaExpression:
    """A compiled expression bound to its source text."""

    def __init__(self, source: str, expression: Any, resolve_async: bool, log_warnings: bool) -> None:
        self.source = source
        self._expression = expression
        self.resolve_async = resolve_async
        self.log_warnings = log_warnings

    def __call__(self, context: Mapping[str, Any] | None = None) -> Any:
        if self._expression is None:
            return None
        value = self._expression(**dict(context or {}))
        if isinstance(value, StrictUndefined):
            value._fail_with_undefined_error()
        if self.resolve_async:
            value = resolve_pending(value, self.source, self.log_warnings)
        return value

    def __repr__(self) -> str:
        return f"JinjaExpression({self.source!r}, resolve_async={self.resolve_async})"


class JinjaExpressionEngine:
    """Compile expression sources into callables evaluated against a context.

    `resolve_async` and `log_warnings` are passed per compile; the engine-wide
    values set through the setters are only the defaults for compiles that
    leave them out.
    """

    def __init__(self, strict_undefined: bool = False, resolve_async: bool = False, log_warnings: bool = True) -> None:
        self.strict_undefined = strict_undefined
        self._resolve_async = resolve_async
        self._log_warnings = log_warnings
        self._environments: dict[tuple[bool, bool], Environment] = {}
        self._lock = threading.Lock()

    def get_async_mode(self) -> bool:
        return self._resolve_async

    def set_async_mode(self, value: bool) -> None:
        self._resolve_async = bool(value)

    def get_log_warnings(self) -> bool:
        return self._log_warnings

    def set_log_warnings(self, value: bool) -> None:
        self._log_warnings = bool(value)

    def environment(self, resolve_async: bool = False, log_warnings: bool = False) -> Environment:
        key = (resolve_async, resolve_async and log_warnings)
        with self._lock:
            env = self._environments.get(key)
            if env is None:
                undefined = StrictUndefined if self.strict_undefined else ChainableUndefined
                if resolve_async:
                    env = ResolvingEnvironment(undefined=undefined, autoescape=False)
                    env.log_warnings = key[1]
                else:
                    env = Environment(undefined=undefined, autoescape=False)
                self._environments[key] = env
            return env

    def compile(self, source: str, resolve_async: bool | None = None, log_warnings: bool | None = None) -> JinjaExpression:
        """Compile a single expression; syntax errors propagate to the caller."""
        if resolve_async is None:
            resolve_async = self._resolve_async
        if log_warnings is None:
            log_warnings = self._log_warnings
        if not source.strip():
            return JinjaExpression(source, None, resolve_async, log_warnings)
        env = self.environment(resolve_async, log_warnings)
        expression = env.compile_expression(source.strip(), undefined_to_none=not self.strict_undefined)
        return JinjaExpression(source, expression, resolve_async, log_warnings)

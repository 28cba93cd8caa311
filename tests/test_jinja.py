"""Tests for the jinja2 expression engine."""

import asyncio
import concurrent.futures
import logging

import pytest
from jinja2 import UndefinedError

from stencil import CollectingErrorSink, Interpolator, JinjaExpressionEngine
from stencil.jinja import resolve_pending


def test_compile_evaluates_against_context():
    engine = JinjaExpressionEngine()
    expr = engine.compile("user.name | upper")
    assert expr({"user": {"name": "ada"}}) == "ADA"
    assert expr.source == "user.name | upper"


def test_missing_names_are_none():
    assert JinjaExpressionEngine().compile("missing.attr")({}) is None


def test_strict_undefined_raises():
    engine = JinjaExpressionEngine(strict_undefined=True)
    with pytest.raises(UndefinedError):
        engine.compile("missing")({})


def test_strict_undefined_render_is_reported():
    sink = CollectingErrorSink()
    interpolator = Interpolator(engine=JinjaExpressionEngine(strict_undefined=True), error_sink=sink)
    assert interpolator.compile("{{ missing }}").render({}) is None
    assert isinstance(sink.errors[0].__cause__, UndefinedError)


def test_non_resolving_expression_keeps_future():
    pending = concurrent.futures.Future()
    assert JinjaExpressionEngine().compile("value")({"value": pending}) is pending


def test_engine_defaults_apply_when_not_given():
    engine = JinjaExpressionEngine()
    engine.set_async_mode(True)
    done = concurrent.futures.Future()
    done.set_result(42)
    assert engine.get_async_mode() is True
    assert engine.compile("value")({"value": done}) == 42
    assert engine.compile("value", resolve_async=False)({"value": done}) is done


def test_resolve_logs_warning_when_enabled(caplog):
    engine = JinjaExpressionEngine()
    done = concurrent.futures.Future()
    done.set_result("x")
    with caplog.at_level(logging.WARNING, logger="stencil.jinja"):
        assert engine.compile("value", resolve_async=True, log_warnings=True)({"value": done}) == "x"
    assert "Pending value found" in caplog.text


def test_deferred_compile_does_not_log(caplog):
    done = concurrent.futures.Future()
    done.set_result("x")
    with caplog.at_level(logging.WARNING, logger="stencil.jinja"):
        assert Interpolator().compile("{|| value ||}").render({"value": done}) == "x"
    assert "Pending value found" not in caplog.text


def test_resolve_pending_asyncio_future():
    loop = asyncio.new_event_loop()
    try:
        fut = loop.create_future()
        assert resolve_pending(fut) is None
        fut.set_result(5)
        assert resolve_pending(fut) == 5
    finally:
        loop.close()


def test_resolve_pending_cancelled_future():
    fut = concurrent.futures.Future()
    fut.cancel()
    assert resolve_pending(fut) is None


def test_resolve_pending_passthrough():
    assert resolve_pending("plain") == "plain"


def test_environments_are_cached():
    engine = JinjaExpressionEngine()
    assert engine.environment(True, False) is engine.environment(True, False)
    assert engine.environment(False, True) is engine.environment(False, False)
    assert engine.environment(True, True) is not engine.environment(True, False)

import pytest

from stencil import CollectingErrorSink, Interpolator


@pytest.fixture
def sink():
    return CollectingErrorSink()


@pytest.fixture
def interpolate(sink):
    """Interpolator with default delimiters whose render errors are collected."""
    return Interpolator(error_sink=sink)

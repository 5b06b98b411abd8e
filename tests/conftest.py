#!/usr/bin/env python
"""Root conftest.py that provides fixtures for the test suite.

This file contains:
1. An in-memory stream fixture that sinks write into
2. A JSON-lines reader for inspecting emitted records
3. A factory for fresh root loggers with their own registry
"""

import io
import json

import pytest

from focuslog import new_logger


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "serial: mark test to run serially (non-parallel)")


@pytest.fixture
def stream():
    """Text stream that collects everything a sink writes."""
    return io.StringIO()


@pytest.fixture
def read_records(stream):
    """Parse the JSON lines written to ``stream`` so far."""

    def _read():
        return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]

    return _read


@pytest.fixture
def make_root(stream):
    """Build a fresh root logger writing JSON to ``stream``.

    Keyword arguments are forwarded to :func:`focuslog.new_logger`.
    """

    def _make(**kwargs):
        kwargs.setdefault("stream", stream)
        kwargs.setdefault("level", "TRACE")
        kwargs.setdefault("add_source", False)
        return new_logger(**kwargs)

    return _make


@pytest.fixture
def root(make_root):
    """Root logger at trace level writing JSON to ``stream``."""
    return make_root()

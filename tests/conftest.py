"""Shared pytest fixtures for the swiss-army test suite.

Provides a quiet executor, a helper that drives coroutines from plain
test functions, and a scrubbed environment so the ambient debug toggle
never leaks into assertions.
"""

from __future__ import annotations

import asyncio
import io

import pytest

from swiss_army.debug import DEBUG_ENV_VAR
from swiss_army.runner import Executor


@pytest.fixture(autouse=True)
def no_ambient_debug(monkeypatch):
    """Remove ``$SWISS_ARMY_DEBUG`` so tests start with diagnostics off.

    Tests that exercise the toggle set it again explicitly.
    """
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)


@pytest.fixture
def run():
    """Return a function that runs a coroutine to completion.

    Keeps the suite free of an asyncio pytest plugin: each call gets its
    own event loop via ``asyncio.run``.

    Example::

        out = run(executor.run("printf hello"))
    """
    return asyncio.run


@pytest.fixture
def trace() -> io.StringIO:
    """An in-memory diagnostic stream for executors built with ``debug=True``."""
    return io.StringIO()


@pytest.fixture
def executor() -> Executor:
    """An executor with diagnostics explicitly disabled."""
    return Executor(debug=False)

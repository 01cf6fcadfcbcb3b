"""Shared pytest fixtures for calcgrapher tests."""

from __future__ import annotations

import logging

import pytest

# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

"""Pytest configuration and shared fixtures for ccseed tests."""

from __future__ import annotations

import logging

import pytest

from ccseed.config.config import reset_config


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("asyncio", "marks tests as async (deselect with '-m \"not asyncio\"')"),
        ("unit", "marks tests as unit tests"),
        ("integration", "marks tests as integration tests"),
        ("network", "marks tests as seeding core tests"),
        ("config", "marks tests as configuration tests"),
        ("cli", "marks tests as CLI tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_ccseed_env(monkeypatch, tmp_path):
    """Keep user config files and CCSEED_* variables out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("CCSEED_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("ccseed.config.config.Path.home", lambda: tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # setup_logging() detaches the package logger from the root; undo it so
    # caplog sees records in later tests
    package_logger = logging.getLogger("ccseed")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


"""
Pytest configuration and fixtures for Sweepr tests.
"""

import io
import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import Config


@pytest.fixture
def fast_config():
    """Config with every delay set to zero."""
    config = Config()
    config.set('task_start_delay_ms', 0)
    config.set('inter_task_delay_ms', 0)
    config.set('batch_start_delay_ms', 0)
    config.set('spinner_interval_ms', 20)
    return config


@pytest.fixture
def stream():
    """In-memory output stream for spinner and engine output."""
    return io.StringIO()


@pytest.fixture
def restore_root_logger():
    """Remove handlers that a test adds to the root logger."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

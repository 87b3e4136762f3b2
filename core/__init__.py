"""
Sweepr Core Module
Builds cleanup task catalogs and runs them.
"""

from .config import Config
from .catalog import build_catalog
from .context import ExecutionContext, Mode, Platform, build_context
from .engine import CleanupEngine, RunResult, TaskOutcome
from .tasks import Task
from .logger import setup_logging

__all__ = [
    'Config',
    'build_catalog',
    'ExecutionContext',
    'Mode',
    'Platform',
    'build_context',
    'CleanupEngine',
    'RunResult',
    'TaskOutcome',
    'Task',
    'setup_logging'
]

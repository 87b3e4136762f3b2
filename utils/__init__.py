"""
Sweepr Utilities
Progress display, input validation, error messages and tool checks.
"""

from .system_check import SystemCheck
from .progress import Spinner

__all__ = ['SystemCheck', 'Spinner']

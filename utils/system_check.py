"""
System tools validation for Sweepr.
Checks which external programs used by a catalog are available.
"""

import shutil
from typing import Dict, Iterable, List, Optional

from colorama import Fore, Style


class SystemCheck:
    """Looks up catalog programs on PATH."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize SystemCheck.

        Args:
            path: Search path override (None = PATH environment variable)
        """
        self.path = path
        self._cache: Dict[str, bool] = {}

    def check_tool(self, program: str) -> bool:
        """
        Check if a program is available.

        Args:
            program: Program name (argv[0])

        Returns:
            True if the program can be found, False otherwise
        """
        if program not in self._cache:
            self._cache[program] = shutil.which(program, path=self.path) is not None
        return self._cache[program]

    def missing_tools(self, catalog: Iterable) -> List[str]:
        """
        Programs referenced by command tasks in catalog that are not installed.

        Returns:
            Program names in first-use order, without duplicates
        """
        missing = []
        for task in catalog:
            if not task.is_command:
                continue
            program = task.argv[0]
            if program not in missing and not self.check_tool(program):
                missing.append(program)
        return missing

    def display_tool_status(self, missing: List[str]):
        """Print one summary line about missing programs."""
        if not missing:
            print(f"[TOOLS] {Fore.GREEN}All cleanup tools found{Style.RESET_ALL}")
            return
        print(f"[TOOLS] {Fore.YELLOW}Not installed (will be skipped with an error): "
              f"{', '.join(missing)}{Style.RESET_ALL}")

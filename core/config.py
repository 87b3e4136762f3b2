"""
Configuration management for Sweepr.
Loads and validates configuration settings.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class Config:
    """Manages application configuration."""

    # Default configuration values
    DEFAULT_CONFIG = {
        'log_folder': 'logs',
        'max_log_files': 5,
        'spinner_interval_ms': 100,
        'task_start_delay_ms': 1000,
        'inter_task_delay_ms': 200,
        'batch_start_delay_ms': 2000,
        'command_timeout_seconds': 1800,
        'max_output_chars': 2000,
        'log_retention_days': 10,
        'journal_retention_days': 100,
        'profile_root': None,
    }

    # field: (min, max, display name, example)
    NUMERIC_FIELDS = {
        'max_log_files': (1, 100, "Maximum log files", 5),
        'spinner_interval_ms': (20, 2000, "Spinner redraw interval", 100),
        'task_start_delay_ms': (0, 10000, "Delay before each task", 1000),
        'inter_task_delay_ms': (0, 10000, "Delay between tasks", 200),
        'batch_start_delay_ms': (0, 10000, "Delay before first task", 2000),
        'command_timeout_seconds': (1, 86400, "Command timeout", 1800),
        'max_output_chars': (100, 100000, "Maximum captured output", 2000),
        'log_retention_days': (1, 3650, "Log retention days", 10),
        'journal_retention_days': (1, 3650, "Journal retention days", 100),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config.json file. If None, uses defaults.
        """
        self.config = self.DEFAULT_CONFIG.copy()

        if config_path and config_path.exists():
            self.load_config(config_path)

    def load_config(self, config_path: Path):
        """Load configuration from JSON file."""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            if not isinstance(user_config, dict):
                print("\nERROR: Config file must contain a JSON object")
                print(f"  Config file: {config_path.absolute()}")
                print("Using default configuration instead.")
                return

            # Validate loaded config before applying
            is_valid, errors = self._validate_config(user_config)
            if not is_valid:
                print(f"\nConfiguration validation failed:")
                print(f"  Config file: {config_path.absolute()}")
                print()
                for error in errors:
                    print(error)
                    print()
                print("Using default configuration instead.")
                return

            self.config.update(user_config)
        except json.JSONDecodeError as e:
            print(f"\nERROR: Invalid JSON in config file")
            print(f"  Config file: {config_path.absolute()}")
            print(f"  Problem: {e}")
            print(f"  Line: {e.lineno}, Column: {e.colno}")
            print()
            print("Fix the JSON syntax and try again.")
            print("Using default configuration.")
        except OSError as e:
            print(f"\nERROR: Could not load config file")
            print(f"  Config file: {config_path.absolute()}")
            print(f"  Problem: {e}")
            print()
            print("Using default configuration.")

    def save_config(self, config_path: Path):
        """Save current configuration to JSON file."""
        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=4)
        except OSError as e:
            print(f"Error saving config to {config_path}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """Set configuration value."""
        self.config[key] = value

    def _validate_config(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate configuration dictionary.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        for field, (min_val, max_val, display_name, example) in self.NUMERIC_FIELDS.items():
            if field in config:
                value = config[field]
                if isinstance(value, bool) or not isinstance(value, int):
                    errors.append(
                        f"ERROR: Invalid config value\n"
                        f"  Field: {field}\n"
                        f"  Value: {repr(value)} ({type(value).__name__})\n"
                        f"  Expected: number (integer)\n"
                        f"  Example: {example}\n"
                        f"  Valid range: {min_val} to {max_val}"
                    )
                elif value < min_val or value > max_val:
                    errors.append(
                        f"ERROR: Invalid config value\n"
                        f"  Field: {field}\n"
                        f"  Value: {value}\n"
                        f"  Expected: number between {min_val} and {max_val}\n"
                        f"  Example: {example}"
                    )

        # Validate string fields
        if 'log_folder' in config:
            if not isinstance(config['log_folder'], str):
                errors.append(f"log_folder must be a string, got {type(config['log_folder']).__name__}")

        if 'profile_root' in config:
            value = config['profile_root']
            if value is not None and not isinstance(value, str):
                errors.append(
                    f"ERROR: Invalid config value\n"
                    f"  Field: profile_root\n"
                    f"  Value: {repr(value)} ({type(value).__name__})\n"
                    f"  Expected: directory path (string) or null\n"
                    f"  Example: \"/home\""
                )

        return (len(errors) == 0, errors)

    @property
    def log_folder(self) -> str:
        """Get log folder path."""
        return self.config['log_folder']

    @property
    def max_log_files(self) -> int:
        """Get maximum number of log files to keep."""
        return self.config['max_log_files']

    @property
    def spinner_interval(self) -> float:
        """Spinner redraw interval in seconds."""
        return self.config['spinner_interval_ms'] / 1000.0

    @property
    def task_start_delay(self) -> float:
        """Pause between starting the spinner and dispatching a task, in seconds."""
        return self.config['task_start_delay_ms'] / 1000.0

    @property
    def inter_task_delay(self) -> float:
        """Pause after each task, in seconds."""
        return self.config['inter_task_delay_ms'] / 1000.0

    @property
    def batch_start_delay(self) -> float:
        """Pause before the first task, in seconds."""
        return self.config['batch_start_delay_ms'] / 1000.0

    @property
    def command_timeout(self) -> int:
        """Get external command timeout in seconds."""
        return self.config['command_timeout_seconds']

    @property
    def max_output_chars(self) -> int:
        """Get maximum captured command output kept on failures."""
        return self.config['max_output_chars']

    @property
    def log_retention_days(self) -> int:
        """Get age (days) after which /var/log files are removed in full mode."""
        return self.config['log_retention_days']

    @property
    def journal_retention_days(self) -> int:
        """Get journal vacuum window in days."""
        return self.config['journal_retention_days']

    @property
    def profile_root(self) -> Optional[str]:
        """Get profile base directory override (None = platform default)."""
        return self.config.get('profile_root')

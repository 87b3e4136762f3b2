"""
Logging setup and management for Sweepr.
"""

import os
import logging
import datetime
import glob
from pathlib import Path


def setup_logging(log_folder: str = 'logs', max_log_files: int = 5) -> Path:
    """
    Set up logging configuration.

    Args:
        log_folder: Directory to store log files
        max_log_files: Maximum number of log files to keep

    Returns:
        Path to the current log file
    """
    logs_folder = Path(log_folder)
    os.makedirs(logs_folder, exist_ok=True)

    # Generate unique log file name
    current_time = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    log_file = logs_folder / f'sweepr-{current_time}.log'

    # Clean up old log files, leaving room for the one about to be created
    cleanup_old_logs(logs_folder, max(0, max_log_files - 1))

    # Configure logging
    log_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    log_handler = logging.FileHandler(log_file, encoding='utf-8')
    log_handler.setFormatter(log_formatter)

    logger = logging.getLogger()
    logger.setLevel(logging.INFO)
    logger.addHandler(log_handler)

    return log_file


def cleanup_old_logs(logs_folder: Path, max_files: int):
    """
    Remove old log files, keeping only the most recent ones.

    Args:
        logs_folder: Directory containing log files
        max_files: Maximum number of log files to keep
    """
    existing_logs = sorted(glob.glob(str(logs_folder / 'sweepr-*.log')))
    while len(existing_logs) > max_files:
        try:
            os.remove(existing_logs.pop(0))
        except OSError as e:
            logging.warning(f"Could not remove old log file: {e}")


def log_command_error(error, task_description: str = ""):
    """
    Log detailed error information for external command failures.

    Args:
        error: CommandError exception
        task_description: Task the command belonged to
    """
    prefix = f"{task_description}: " if task_description else ""
    if error.returncode is not None:
        logging.error(f"{prefix}command failed with return code {error.returncode}")
    else:
        logging.error(f"{prefix}command could not run: {error.reason}")
    logging.error(f"Command: {error.command_line}")
    if error.output:
        logging.error(f"Output:\n{error.output}")

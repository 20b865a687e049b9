# utils.py
"""
Utility functions for the random-walk application.

Logging setup and configuration file loading live here; neither belongs to
the engine or the renderer.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: The full configuration. Its optional "logging" section may
#       set "level", "format", "log_file", "max_bytes" and "backup_count".
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler.
#     Creates the log directory. Raises numba's loggers to WARNING.
#
# should_log_step(step: int, every: int) -> bool:
#   - True on every `every`-th step; never when every <= 0.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON object.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when
#     the top level is not an object. All are logged before re-raising.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/gravity_walk.log'
DEFAULT_MAX_BYTES = 1024*1024
DEFAULT_BACKUP_COUNT = 5
# Third-party loggers that flood DEBUG output during JIT compilation.
NOISY_LOGGERS = ('numba',)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger for console and rotating-file output.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    max_bytes = log_config.get('max_bytes', DEFAULT_MAX_BYTES)
    backup_count = log_config.get('backup_count', DEFAULT_BACKUP_COUNT)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Repeated setup must not duplicate output.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=max_bytes, backupCount=backup_count
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Keep compiler chatter out of the simulation log even at DEBUG.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logger.level, logging.WARNING))

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {log_level}, log file {log_file_path}.")


def load_config(path: str = 'config.json') -> Dict[str, Any]:
    """Loads the JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object."
        logging.error(msg)
        raise ValueError(msg)

    logging.info("Configuration loaded successfully.")
    return config


def should_log_step(step: int, every: int) -> bool:
    """Throttle for per-tick logging in hot loops. every <= 0 disables it."""
    return every > 0 and step % every == 0

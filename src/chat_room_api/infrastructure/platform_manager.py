import logging
import os
import time
from pathlib import Path


def create_logger(
    log_level: str = "INFO",
    logger_name: str = "chat-room-api",
    logs_dir: str | Path = "logs",
) -> logging.Logger:
    """
    Create a logger that outputs to console and optionally to a file.

    Args:
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        logger_name (str): Name for the logger instance, also used as the log file name.
        logs_dir (str | Path): Directory for log files.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    if not logger.hasHandlers():  # Prevent handler duplication
        # Console handler (stdio) - always add this
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        try:
            logs_dir = Path(logs_dir)
            logs_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(logs_dir / f"{logger_name}.log")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError:
            # If file logging fails, just continue with console logging
            pass

    return logger


def get_parameters(
    param_names: list[str] | str,
    defaults: dict[str, str] | None = None,
) -> dict[str, str | None]:
    """
    Retrieve parameters from environment variables.

    Parameters are stored in the environment in uppercase but returned keyed by their
    lowercase name. A parameter missing from the environment falls back to `defaults`,
    or None.

    Args:
        param_names (list[str] | str): The parameter name(s) to retrieve.
        defaults (dict[str, str] | None): Fallback values keyed by lowercase name.

    Returns:
        dict[str, str | None]: Mapping of lowercase parameter name to its value.
    """
    if isinstance(param_names, str):
        param_names = [param_names]

    defaults = defaults or {}
    result = {}
    for param_name in param_names:
        key = param_name.lower()
        result[key] = os.getenv(param_name.upper(), defaults.get(key))
    return result


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)

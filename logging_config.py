"""
Logging Configuration
Sets up the global logger for the application.
"""
import logging
import sys
from typing import Optional

# Module loggers live under the package directories, not a single namespace.
NAMESPACES = ("canvas", "controllers", "disk", "models", "ui", "main", "__main__")


def level_from_name(name: str | int) -> int:
    """Map 'debug'/'INFO'/20 to a logging level; unknown names give INFO."""
    if isinstance(name, int):
        return name
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.INFO)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the loggers for the editor's packages.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    # Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [console_handler]

    # File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate lines if called twice
        for old in logger.handlers:
            old.close()
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("controllers").info("Logging initialized.")

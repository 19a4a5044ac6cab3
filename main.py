"""Application entry point for Constellation"""

import argparse
import logging
import sys
import tkinter as tk
from pathlib import Path

from controllers.app import App
from disk.storage import IO
from logging_config import level_from_name, setup_logging
from models.settings import Settings

MIN_PYTHON: tuple[int, int] = (3, 11)

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="constellation", description="Family constellation diagram editor")
    parser.add_argument("document", nargs="?", type=Path, help="constellation .json to open")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR (overrides settings)")
    parser.add_argument("--log-file", type=Path, help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run Constellation"""
    if sys.version_info < MIN_PYTHON:
        raise RuntimeError("Constellation requires Python 3.11+")
    args = _parse_args(argv)

    try:
        settings = IO.load_settings()
    except (OSError, ValueError) as xcp:
        print(f"settings unreadable, using defaults: {xcp}", file=sys.stderr)
        settings = Settings()

    log_file = args.log_file or settings.log_file
    setup_logging(level_from_name(args.log_level or settings.log_level), str(log_file) if log_file else None)

    root = tk.Tk()
    App(root, settings=settings, document_path=args.document)
    try:
        root.mainloop()
    except tk.TclError as xcp:
        if "application has been destroyed" not in str(xcp):
            raise
    logger.info("bye")


if __name__ == "__main__":
    main()

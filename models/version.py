"""Application version string, resolved once per process."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable
from functools import cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

DIST_NAME: Final = "constellation-editor"
ENV_VAR: Final = "CONSTELLATION_VERSION"
FALLBACK: Final = "dev"

_ROOT = Path(__file__).resolve().parent.parent


def _from_env() -> str | None:
    return os.getenv(ENV_VAR, "").strip() or None


def _from_metadata() -> str | None:
    try:
        return version(DIST_NAME).strip() or None
    except PackageNotFoundError:
        return None


def _from_git() -> str | None:
    if not (_ROOT / ".git").exists():
        return None
    try:
        out = subprocess.run(
            ["git", "describe", "--tags", "--always", "--dirty"],
            cwd=_ROOT,
            capture_output=True,
            text=True,
            check=True,
            timeout=2,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.stdout.strip() or None


_SOURCES: Final[tuple[Callable[[], str | None], ...]] = (_from_env, _from_metadata, _from_git)


@cache
def get_app_version() -> str:
    """Env override first, then installed metadata, then git; "dev" if none answer."""
    for source in _SOURCES:
        if found := source():
            return found
    return FALLBACK


def reset_cache() -> None:
    get_app_version.cache_clear()

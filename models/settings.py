from pathlib import Path
from typing import Literal

from pydantic import Field

from models.catalogue import DEFAULT_GENERATION, Generation
from models.styling import Model

SETTINGS_VERSION = 1


class Settings(Model):
    """Per-user editor preferences. Never part of a saved document."""

    canvas_width: int = Field(default=800, ge=200)
    canvas_height: int = Field(default=600, ge=200)
    autosave_ms: int = Field(default=400, ge=0)
    autosave_enabled: bool = True
    draft_dir: Path = Field(default_factory=lambda: Path.home() / ".constellation" / "drafts")
    default_generation: Generation = DEFAULT_GENERATION
    confirm_destructive: bool = True
    theme: Literal["dark", "light", "none"] = "light"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path | None = None
    version: int = Field(default=SETTINGS_VERSION)

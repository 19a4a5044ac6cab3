import enum
from pathlib import Path


class Formats(enum.StrEnum):
    json = enum.auto()
    png = enum.auto()
    md = enum.auto()

    @classmethod
    def check(cls, path: Path) -> "Formats | None":
        suf = path.suffix[1:].lower()
        return Formats(suf) if suf in Formats else None

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def filetypes(cls, *only: "Formats") -> list[tuple[str, str]]:
        """Tk file dialog `filetypes` list."""
        return [(f.description, f"*.{f.value}") for f in (only or tuple(cls))]


_DESCRIPTIONS = {
    Formats.json: "Constellation document",
    Formats.png: "PNG image",
    Formats.md: "Markdown summary",
}

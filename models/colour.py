import re
from dataclasses import dataclass

_HEX = re.compile(r"^#?([0-9a-fA-F]{6})$")
_SHORT_HEX = re.compile(r"^#?([0-9a-fA-F]{3})$")


@dataclass(frozen=True, slots=True)
class Colour:
    name: str
    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self):
        for channel in ("red", "green", "blue", "alpha"):
            v = int(getattr(self, channel))
            object.__setattr__(self, channel, min(255, max(0, v)))
        object.__setattr__(self, "name", self.name.lower())

    @classmethod
    def from_hex(cls, value: str, name: str = "") -> "Colour":
        """Parse "#RRGGBB" or "#RGB"; raises ValueError otherwise."""
        v = value.strip()
        if m := _HEX.match(v):
            h = m.group(1)
        elif m := _SHORT_HEX.match(v):
            h = "".join(c * 2 for c in m.group(1))
        else:
            raise ValueError(f"not a hex colour: {value!r}")
        return cls(name, int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return self.red, self.green, self.blue, self.alpha

    @property
    def hex(self) -> str:
        # "#RRGGBB" for Tk/PIL
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"


def normalise_hex(value: str) -> str:
    return Colour.from_hex(value).hex


class Colours:
    """Member palette offered by the colour picker, plus a few system tones."""

    blue = Colour.from_hex("#3B82F6", "blue")
    green = Colour.from_hex("#10B981", "green")
    orange = Colour.from_hex("#F59E0B", "orange")
    red = Colour.from_hex("#EF4444", "red")
    purple = Colour.from_hex("#9333EA", "purple")
    pink = Colour.from_hex("#EC4899", "pink")
    gray = Colour.from_hex("#6B7280", "gray")
    teal = Colour.from_hex("#14B8A6", "teal")

    class sys:
        white = Colour("white", 255, 255, 255)
        ink = Colour.from_hex("#1F2937", "ink")
        grid = Colour.from_hex("#E5E7EB", "grid")
        connecting = Colour.from_hex("#2563EB", "connecting")
        rubber_band = Colour.from_hex("#6B7280", "rubber_band")

    @classmethod
    def palette(cls) -> list[Colour]:
        return [c for c in vars(cls).values() if isinstance(c, Colour)]

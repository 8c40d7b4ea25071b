from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

PALETTE_SIZE = 256

Color = tuple[int, int, int]

# xterm system colours 0-15
SYSTEM_COLOURS = [
    0x000000,
    0x800000,
    0x008000,
    0x808000,
    0x000080,
    0x800080,
    0x008080,
    0xC0C0C0,
    0x808080,
    0xFF0000,
    0x00FF00,
    0xFFFF00,
    0x0000FF,
    0xFF00FF,
    0x00FFFF,
    0xFFFFFF,
]
CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


class LoadError(ValueError):
    """Palette source is missing, short, or has a malformed entry."""


def distance(a: Color, b: Color) -> int:
    """Sum of squared channel differences (not square-rooted)."""
    return sum((int(x) - int(y)) ** 2 for x, y in zip(a, b))


def _unpack(value: int) -> Color:
    return (value >> 16 & 0xFF, value >> 8 & 0xFF, value & 0xFF)


def _parse_entry(line: str, lineno: int) -> Color:
    _, sep, hex_value = line.partition(":")
    if not sep:
        raise LoadError(f"line {lineno}: missing ':' in {line!r}")
    try:
        value = int(hex_value.strip(), 16)
    except ValueError:
        raise LoadError(f"line {lineno}: invalid hex colour {hex_value.strip()!r}") from None
    if not 0 <= value <= 0xFFFFFF:
        raise LoadError(f"line {lineno}: colour out of range {hex_value.strip()!r}")
    return _unpack(value)


@dataclass(frozen=True)
class Palette:
    """Ordered set of 256 reference colours; index i is terminal colour i."""

    colours: tuple[Color, ...]
    array: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.colours) != PALETTE_SIZE:
            raise LoadError(f"Palette needs {PALETTE_SIZE} colours, got {len(self.colours)}")
        colours = tuple(tuple(int(c) for c in colour) for colour in self.colours)
        if any(len(colour) != 3 or not all(0 <= c <= 255 for c in colour) for colour in colours):
            raise LoadError("Palette colours must be (r, g, b) tuples of 8-bit channels")
        object.__setattr__(self, "colours", colours)
        array = np.array(colours, dtype=np.int64)
        array.setflags(write=False)
        object.__setattr__(self, "array", array)

    def __len__(self) -> int:
        return PALETTE_SIZE

    def __getitem__(self, index: int) -> Color:
        return self.colours[index]

    @classmethod
    def parse(cls, text: str) -> "Palette":
        lines = text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        if len(lines) < PALETTE_SIZE:
            raise LoadError(f"Palette needs {PALETTE_SIZE} entries, got {len(lines)}")
        return cls(tuple(_parse_entry(line, n) for n, line in enumerate(lines[:PALETTE_SIZE], start=1)))

    @classmethod
    def load(cls, path: str | Path) -> "Palette":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Could not read palette {path}: {e}") from e
        return cls.parse(text)

    def dump(self) -> str:
        return "".join(f"{i}:{r:02x}{g:02x}{b:02x}\n" for i, (r, g, b) in enumerate(self.colours))

    def nearest(self, colour: Color) -> int:
        """Index of the closest palette entry; the lowest index wins ties."""
        best = 0
        best_dist = distance(colour, self.colours[0])
        for i in range(1, PALETTE_SIZE):
            dist = distance(colour, self.colours[i])
            if dist < best_dist:
                best_dist = dist
                best = i
        return best

    def nearest_many(self, pixels: np.ndarray) -> np.ndarray:
        """Vectorised ``nearest`` over an array of shape (..., 3)."""
        pixels = np.asarray(pixels, dtype=np.int64)
        diff = pixels[..., None, :] - self.array
        # argmin returns the first minimum, same tie-break as nearest()
        return (diff * diff).sum(axis=-1).argmin(axis=-1).astype(np.uint8)


def xterm_palette() -> Palette:
    """The standard xterm 256-colour palette."""
    colours = [_unpack(value) for value in SYSTEM_COLOURS]
    for r in CUBE_LEVELS:
        for g in CUBE_LEVELS:
            for b in CUBE_LEVELS:
                colours.append((r, g, b))
    for step in range(24):
        level = 8 + 10 * step
        colours.append((level, level, level))
    return Palette(tuple(colours))

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Palette schema -- the data contracts of the color pipeline.

Design principles:
- Immutable: All types are frozen dataclasses
- Total: An AnsiPalette always carries all 22 colors
- Deterministic: Same input -> same palette
- Serializable: dict/JSON ready for external theme writers

Color storage is 8-bit sRGB. Perceptual views (CIE Lab for clustering,
Oklch for tone and hue edits) are computed on demand:

- Lab L: 0 = black, 100 = white
- Oklch L: 0.0 = black, 1.0 = white
- Oklch C: 0.0 = gray, ~0.32 = max saturation in sRGB
- Oklch H: 0-360 degrees (≈25=red, ≈90=yellow, ≈145=green, ≈195=cyan,
  ≈260=blue, ≈325=magenta)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from nuri.schema.diagnostics import Diagnostic, ContrastUnattainable


# =============================================================================
# Core Color Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Color:
    """
    A single 8-bit sRGB color.

    This is the canonical representation for every color the pipeline
    produces. Conversions to Lab and Oklch are pure functions, and a
    round trip through either space lands within one channel unit.

    Attributes:
        r, g, b: Channel values, integers in [0, 255]
    """
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        """Validate channel values."""
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not isinstance(value, (int, np.integer)) or not 0 <= value <= 255:
                raise ValueError(f"Channel {name} must be an int 0-255, got {value!r}")
            # NumPy scalars from pixel arrays are stored as plain ints
            object.__setattr__(self, name, int(value))

    @property
    def hex(self) -> str:
        """Lowercase hex string like "#3941c8"."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def __str__(self) -> str:
        return self.hex

    @classmethod
    def from_hex(cls, hex_color: str) -> Color:
        """
        Parse "#rrggbb" or "rrggbb" (either case).

        Raises:
            ValueError: If the string is not six hex digits
        """
        digits = hex_color.strip().lstrip("#")
        if len(digits) != 6:
            raise ValueError(
                f"Invalid hex color {hex_color!r}: expected 6 hex digits, got {len(digits)}"
            )
        try:
            r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        except ValueError as e:
            raise ValueError(f"Invalid hex color {hex_color!r}") from e
        return cls(r, g, b)

    @classmethod
    def from_srgb(cls, srgb: NDArray[np.float64]) -> Color:
        """Build from float sRGB in [0, 1]; out-of-range values are clipped."""
        r, g, b = (np.clip(np.asarray(srgb, dtype=np.float64), 0.0, 1.0) * 255.0).round()
        return cls(int(r), int(g), int(b))

    @classmethod
    def from_lab(cls, L: float, a: float, b: float) -> Color:
        """Build from CIE Lab (D65)."""
        from nuri.pipeline.colorspace import lab_to_srgb
        return cls.from_srgb(lab_to_srgb(np.array([L, a, b], dtype=np.float64)))

    @classmethod
    def from_oklch(cls, L: float, C: float, H: float) -> Color:
        """
        Build from Oklch.

        Out-of-gamut values are clipped per channel. Use
        ``nuri.pipeline.colorspace.oklch_color`` for hue-preserving
        gamut mapping.
        """
        from nuri.pipeline.colorspace import oklch_to_srgb
        return cls.from_srgb(oklch_to_srgb(np.array([L, C, H], dtype=np.float64)))

    def to_srgb(self) -> NDArray[np.float64]:
        """Float sRGB array in [0, 1]."""
        return np.array([self.r, self.g, self.b], dtype=np.float64) / 255.0

    def to_lab(self) -> tuple[float, float, float]:
        """CIE Lab (L, a, b)."""
        from nuri.pipeline.colorspace import srgb_to_lab
        L, a, b = srgb_to_lab(self.to_srgb())
        return float(L), float(a), float(b)

    def to_oklch(self) -> tuple[float, float, float]:
        """Oklch (L, C, H) with H in degrees [0, 360)."""
        from nuri.pipeline.colorspace import srgb_to_oklch
        L, C, H = srgb_to_oklch(self.to_srgb())
        return float(L), float(C), float(H)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"r": self.r, "g": self.g, "b": self.b, "hex": self.hex}

    @classmethod
    def from_dict(cls, data: dict) -> Color:
        """Deserialize from dictionary (channels or hex)."""
        if "r" in data:
            return cls(int(data["r"]), int(data["g"]), int(data["b"]))
        return cls.from_hex(data["hex"])


@dataclass(frozen=True, slots=True)
class ExtractedColor:
    """
    A candidate color produced by clustering.

    Attributes:
        color: The cluster color
        weight: Fraction of pixels the cluster represents, in (0, 1].
            After dedup-merging, weights of a candidate set need not sum
            to exactly 1.0; they rank relative dominance.
    """
    color: Color
    weight: float

    def __post_init__(self) -> None:
        """Validate weight is in valid range."""
        if not 0.0 < self.weight <= 1.0:
            raise ValueError(f"Weight must be in (0, 1], got {self.weight}")

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"color": self.color.hex, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> ExtractedColor:
        """Deserialize from dictionary."""
        return cls(color=Color.from_hex(data["color"]), weight=data["weight"])


@dataclass(frozen=True, slots=True)
class Extraction:
    """
    Output of the extractor: weighted candidates plus diagnostics.

    This is a reusable artifact. Interactive callers keep it and re-run
    slot assignment and contrast enforcement against it without going
    back to the source image.

    Attributes:
        colors: Candidates ordered by weight descending
        diagnostics: Non-fatal conditions met during extraction
    """
    colors: tuple[ExtractedColor, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "colors": [ec.to_dict() for ec in self.colors],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class ThemeMode(Enum):
    """Whether the theme puts light text on a dark background or vice versa."""
    DARK = "dark"
    LIGHT = "light"


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ContrastThresholds:
    """
    Minimum WCAG contrast ratios against the background.

    Attributes:
        accent: Slots 1-6 and 9-14
        foreground: The foreground base slot
        dim: Slot 8 (bright black)
    """
    accent: float = 4.5
    foreground: float = 7.0
    dim: float = 3.0

    def __post_init__(self) -> None:
        """Validate every ratio lies in the WCAG range."""
        for name in ("accent", "foreground", "dim"):
            value = getattr(self, name)
            if not 1.0 <= value <= 21.0:
                raise ValueError(f"Contrast ratio {name} must be 1-21, got {value}")


# =============================================================================
# ANSI Palette
# =============================================================================

SLOT_COUNT = 16

SPECIAL_COLORS = (
    "background",
    "foreground",
    "cursor_color",
    "cursor_text",
    "selection_background",
    "selection_foreground",
)


@dataclass(frozen=True, slots=True)
class AnsiPalette:
    """
    A complete terminal palette.

    Slots 0-7 are the normal colors, 8-15 their bright variants:

        0 black   1 red      2 green   3 yellow
        4 blue    5 magenta  6 cyan    7 white

    Every one of the 22 colors is always populated; construction fails
    otherwise, so a partially built palette is never observable.

    Attributes:
        slots: Exactly 16 colors, indexed 0-15
        background, foreground: Terminal default colors
        cursor_color, cursor_text: Cursor block and the glyph under it
        selection_background, selection_foreground: Selected text
    """
    slots: tuple[Color, ...]
    background: Color
    foreground: Color
    cursor_color: Color
    cursor_text: Color
    selection_background: Color
    selection_foreground: Color

    def __post_init__(self) -> None:
        """Validate that all 22 colors are present."""
        if len(self.slots) != SLOT_COUNT:
            raise ValueError(f"Palette requires {SLOT_COUNT} slots, got {len(self.slots)}")
        for index, color in enumerate(self.slots):
            if not isinstance(color, Color):
                raise ValueError(f"Slot {index} is not populated: {color!r}")
        for name in SPECIAL_COLORS:
            if not isinstance(getattr(self, name), Color):
                raise ValueError(f"Special color {name} is not populated")

    def to_dict(self) -> dict:
        """Serialize to dictionary of hex strings."""
        result = {name: getattr(self, name).hex for name in SPECIAL_COLORS}
        result["palette"] = [color.hex for color in self.slots]
        return result

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> AnsiPalette:
        """Deserialize from dictionary."""
        return cls(
            slots=tuple(Color.from_hex(h) for h in data["palette"]),
            **{name: Color.from_hex(data[name]) for name in SPECIAL_COLORS},
        )

    @classmethod
    def from_json(cls, json_str: str) -> AnsiPalette:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# Pipeline Result
# =============================================================================


@dataclass(frozen=True, slots=True)
class PaletteResult:
    """
    Final pipeline output.

    The palette is always structurally valid. Diagnostics record anything
    that degraded it; presenting them is up to the caller.

    Attributes:
        palette: The contrast-enforced palette
        mode: The theme mode the palette was built for
        diagnostics: Non-fatal conditions from extraction and enforcement
    """
    palette: AnsiPalette
    mode: ThemeMode
    diagnostics: tuple[Diagnostic, ...] = field(default=())

    @property
    def degraded(self) -> bool:
        """True if any contrast threshold could not be met."""
        return any(isinstance(d, ContrastUnattainable) for d in self.diagnostics)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "mode": self.mode.value,
            "palette": self.palette.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Nuri -- Terminal color palettes from images.

Extracts the dominant colors of an image and arranges them into a
16-slot ANSI palette with background, foreground, cursor and selection
colors, adjusted until every accent is readable on the background.

Quick start::

    import numpy as np
    from PIL import Image
    from nuri import generate_palette

    result = generate_palette(np.asarray(Image.open("wall.png").convert("RGB")))
    result.palette.to_dict()   # Hex colors for a theme writer
    result.diagnostics         # Anything that degraded the palette
"""

from __future__ import annotations

__version__ = "0.1.0"

from nuri.errors import DegenerateClusteringError, InputError, NuriError
from nuri.pipeline import build_palette, extract_colors, generate_palette
from nuri.schema import (
    AnsiPalette,
    Color,
    ContrastThresholds,
    ExtractedColor,
    Extraction,
    PaletteResult,
    ThemeMode,
)

__all__ = [
    # Core API
    "generate_palette",
    "extract_colors",
    "build_palette",
    # Types (commonly needed)
    "AnsiPalette",
    "Color",
    "ExtractedColor",
    "Extraction",
    "ThemeMode",
    "ContrastThresholds",
    "PaletteResult",
    # Errors
    "NuriError",
    "InputError",
    "DegenerateClusteringError",
    # Version
    "__version__",
]

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Schema definitions for the palette pipeline.

All types in this module are immutable (frozen dataclasses).
A palette handed to the caller is a finished value: nothing in the
pipeline keeps a reference to it or changes it afterwards.
"""

from nuri.schema.diagnostics import (
    ContrastUnattainable,
    Diagnostic,
    FewDistinctColors,
    LowDetail,
    LowPixelCount,
)
from nuri.schema.palette import (
    SLOT_COUNT,
    SPECIAL_COLORS,
    AnsiPalette,
    Color,
    ContrastThresholds,
    ExtractedColor,
    Extraction,
    PaletteResult,
    ThemeMode,
)

__all__ = [
    # Core types
    "Color",
    "ExtractedColor",
    "Extraction",
    "ThemeMode",
    # Palette
    "AnsiPalette",
    "SLOT_COUNT",
    "SPECIAL_COLORS",
    # Configuration
    "ContrastThresholds",
    # Result
    "PaletteResult",
    # Diagnostics (non-fatal)
    "Diagnostic",
    "LowPixelCount",
    "LowDetail",
    "FewDistinctColors",
    "ContrastUnattainable",
]

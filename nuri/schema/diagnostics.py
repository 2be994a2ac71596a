# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Non-fatal pipeline conditions.

Diagnostics are structured records returned beside a valid result. The
pipeline never prints them; callers decide how (or whether) to report.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True, slots=True)
class LowPixelCount:
    """
    The input had very few pixels; the palette carries little detail.

    Attributes:
        pixel_count: Number of pixels received
        minimum: Pixel count below which this is reported
    """
    kind: ClassVar[str] = "low_pixel_count"

    pixel_count: int
    minimum: int = 16

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"kind": self.kind, "pixel_count": self.pixel_count, "minimum": self.minimum}


@dataclass(frozen=True, slots=True)
class FewDistinctColors:
    """
    Clustering left fewer distinct colors than the palette has hues.

    Missing hues are synthesized during slot assignment.

    Attributes:
        distinct_colors: Candidates remaining after dedup-merging
        minimum: Count below which this is reported
    """
    kind: ClassVar[str] = "few_distinct_colors"

    distinct_colors: int
    minimum: int = 8

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "kind": self.kind,
            "distinct_colors": self.distinct_colors,
            "minimum": self.minimum,
        }


@dataclass(frozen=True, slots=True)
class ContrastUnattainable:
    """
    A slot could not reach its contrast threshold within the iteration cap.

    The palette keeps the best contrast achieved.

    Attributes:
        slot: Palette slot index (0-15)
        role: "accent", "foreground" or "dim"
        achieved: Best contrast ratio reached
        required: Threshold that was not met
    """
    kind: ClassVar[str] = "contrast_unattainable"

    slot: int
    role: str
    achieved: float
    required: float

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "kind": self.kind,
            "slot": self.slot,
            "role": self.role,
            "achieved": round(self.achieved, 3),
            "required": self.required,
        }


# Informational name for the low pixel count condition
LowDetail = LowPixelCount

Diagnostic = Union[LowPixelCount, FewDistinctColors, ContrastUnattainable]

__all__ = [
    "LowPixelCount",
    "LowDetail",
    "FewDistinctColors",
    "ContrastUnattainable",
    "Diagnostic",
]

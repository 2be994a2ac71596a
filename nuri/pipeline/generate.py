# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
End-to-end palette generation.

    pixels -> Lab -> extract -> detect mode -> assign slots -> enforce contrast

``build_palette`` starts from a cached ``Extraction`` so interactive
callers can flip the mode or the contrast target without re-clustering.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from nuri.schema import ContrastThresholds, Extraction, PaletteResult, ThemeMode
from nuri.pipeline.assign import assign_slots
from nuri.pipeline.contrast import enforce_contrast
from nuri.pipeline.detect import coerce_mode, detect_mode
from nuri.pipeline.extract import (
    DEFAULT_CLUSTERS,
    DEFAULT_SEED,
    extract_colors,
    prepare_pixels,
    validate_lab_pixels,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONTRAST = 4.5


def build_palette(
    extraction: Extraction,
    mode: Union[ThemeMode, str],
    *,
    min_contrast: float = DEFAULT_MIN_CONTRAST,
) -> PaletteResult:
    """
    Assign slots and enforce contrast for an existing extraction.

    Args:
        extraction: Candidates from ``extract_colors``
        mode: Theme mode
        min_contrast: Minimum accent contrast ratio; clamped to [1, 21]

    Returns:
        PaletteResult with extraction and enforcement diagnostics
    """
    mode = coerce_mode(mode)
    accent = float(np.clip(min_contrast, 1.0, 21.0))
    if accent != min_contrast:
        logger.debug("min_contrast %s clamped to %.1f", min_contrast, accent)

    raw = assign_slots(extraction.colors, mode)
    palette, issues = enforce_contrast(raw, mode, ContrastThresholds(accent=accent))

    return PaletteResult(
        palette=palette,
        mode=mode,
        diagnostics=extraction.diagnostics + issues,
    )


def generate_palette_from_lab(
    lab_pixels: NDArray[np.float64],
    *,
    colors: int = DEFAULT_CLUSTERS,
    mode: Optional[Union[ThemeMode, str]] = None,
    min_contrast: float = DEFAULT_MIN_CONTRAST,
    seed: Optional[int] = DEFAULT_SEED,
) -> PaletteResult:
    """
    Generate a palette from CIE Lab pixels.

    Args:
        lab_pixels: Array of shape (N, 3)
        colors: Number of k-means clusters
        mode: Override the detected theme mode
        min_contrast: Minimum accent contrast ratio
        seed: Clustering seed; change it to regenerate

    Raises:
        InputError: Empty or malformed input
        DegenerateClusteringError: No colors could be extracted
    """
    data = validate_lab_pixels(lab_pixels)
    extraction = extract_colors(data, k=colors, seed=seed)
    theme = detect_mode(data, override=mode)
    logger.debug("%d candidates, %s theme", len(extraction.colors), theme.value)
    return build_palette(extraction, theme, min_contrast=min_contrast)


def generate_palette(
    pixels: NDArray[np.uint8],
    *,
    colors: int = DEFAULT_CLUSTERS,
    mode: Optional[Union[ThemeMode, str]] = None,
    min_contrast: float = DEFAULT_MIN_CONTRAST,
    seed: Optional[int] = DEFAULT_SEED,
) -> PaletteResult:
    """
    Generate a terminal palette from decoded sRGB pixels.

    Args:
        pixels: uint8 array of shape (H, W, 3) or (N, 3)
        colors: Number of k-means clusters
        mode: "dark"/"light" (or ThemeMode) to skip detection
        min_contrast: Minimum accent contrast ratio, clamped to [1, 21]
        seed: Clustering seed

    Returns:
        PaletteResult holding a fully populated palette
    """
    return generate_palette_from_lab(
        prepare_pixels(pixels),
        colors=colors,
        mode=mode,
        min_contrast=min_contrast,
        seed=seed,
    )

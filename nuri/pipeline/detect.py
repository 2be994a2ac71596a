# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""Dark/light theme classification from mean Lab lightness."""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from nuri.errors import InputError
from nuri.schema import ThemeMode
from nuri.pipeline.extract import validate_lab_pixels

logger = logging.getLogger(__name__)

# Mean Lab L above this reads as a light image
LIGHT_THRESHOLD = 55.0


def detect_mode(
    lab_pixels: NDArray[np.float64],
    override: Optional[Union[ThemeMode, str]] = None,
) -> ThemeMode:
    """
    Classify an image as dark or light.

    Args:
        lab_pixels: Array of shape (N, 3) with CIE Lab values
        override: Explicit mode. When given, the pixels are not examined
            and the mode is returned as-is ("dark"/"light" strings are
            accepted).

    Returns:
        ThemeMode.LIGHT if mean L > 55, else ThemeMode.DARK

    Raises:
        InputError: Unknown override, or empty/malformed pixels
    """
    if override is not None:
        return coerce_mode(override)

    data = validate_lab_pixels(lab_pixels)
    mean_lightness = float(data[:, 0].mean())
    mode = ThemeMode.LIGHT if mean_lightness > LIGHT_THRESHOLD else ThemeMode.DARK
    logger.debug("mean lightness %.1f -> %s", mean_lightness, mode.value)
    return mode


def coerce_mode(mode: Union[ThemeMode, str]) -> ThemeMode:
    """Return ``mode`` as a ThemeMode, accepting its string value."""
    if isinstance(mode, ThemeMode):
        return mode
    try:
        return ThemeMode(str(mode).lower())
    except ValueError as e:
        raise InputError(f"Unknown theme mode {mode!r}: expected 'dark' or 'light'") from e

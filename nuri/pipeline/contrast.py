# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
WCAG contrast enforcement against the palette background.

Each checked slot is walked away from the background in Oklch lightness
(up on dark themes, down on light themes) until it meets its threshold.
Hue and chroma are kept, apart from chroma reduction at the gamut edge.
A slot that already passes is returned untouched, so enforcing an
enforced palette changes nothing.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional, Union

from nuri.schema import AnsiPalette, Color, ContrastThresholds, ContrastUnattainable, ThemeMode
from nuri.pipeline.colorspace import adjust_lightness, contrast_ratio
from nuri.pipeline.assign import background_slot, bright_delta, foreground_slot
from nuri.pipeline.detect import coerce_mode

logger = logging.getLogger(__name__)

ACCENT_SLOTS = (1, 2, 3, 4, 5, 6, 9, 10, 11, 12, 13, 14)
BRIGHT_SLOTS = (9, 10, 11, 12, 13, 14)
DIM_SLOT = 8

LIGHTNESS_STEP = 0.01
MAX_ITERATIONS = 100


def adjust_to_contrast(
    color: Color,
    background: Color,
    minimum: float,
    step: float,
    max_iterations: int = MAX_ITERATIONS,
) -> tuple[Color, float, bool]:
    """
    Move a color's lightness until it contrasts enough with the background.

    Each attempt is taken from the original color (``step * i`` away), so
    rounding to 8-bit channels does not accumulate over the walk.

    Args:
        color: Starting color
        background: Color to contrast against
        minimum: Required WCAG ratio
        step: Oklch lightness change per iteration (signed)
        max_iterations: Attempts before giving up

    Returns:
        (color, ratio, met). When the threshold cannot be met, the color
        with the highest ratio seen (the starting color included) is
        returned with met=False.
    """
    ratio = contrast_ratio(color, background)
    if ratio >= minimum:
        return color, ratio, True

    best, best_ratio = color, ratio
    for i in range(1, max_iterations + 1):
        candidate = adjust_lightness(color, step * i)
        candidate_ratio = contrast_ratio(candidate, background)
        if candidate_ratio >= minimum:
            return candidate, candidate_ratio, True
        if candidate_ratio > best_ratio:
            best, best_ratio = candidate, candidate_ratio

    return best, best_ratio, False


def enforce_contrast(
    palette: AnsiPalette,
    mode: Union[ThemeMode, str],
    thresholds: Optional[ContrastThresholds] = None,
) -> tuple[AnsiPalette, tuple[ContrastUnattainable, ...]]:
    """
    Bring every accent, the foreground and the dim slot up to contrast.

    Slots 1-6 are enforced before their bright variants 9-14. A bright
    variant that lands on its enforced normal color is moved one bright
    step further from the background, so the pair stays distinct wherever
    the gamut leaves room.

    Args:
        palette: Palette from slot assignment
        mode: Theme mode; picks the background slot and step direction
        thresholds: Required ratios (defaults: 4.5 / 7.0 / 3.0)

    Returns:
        (palette, issues): A new palette with compliant slots, and one
        ContrastUnattainable per slot that hit the iteration cap.
    """
    mode = coerce_mode(mode)
    if thresholds is None:
        thresholds = ContrastThresholds()

    step = LIGHTNESS_STEP if mode is ThemeMode.DARK else -LIGHTNESS_STEP
    background = palette.slots[background_slot(mode)]
    fg_slot = foreground_slot(mode)

    checks = [(slot, "accent", thresholds.accent) for slot in ACCENT_SLOTS]
    checks.append((fg_slot, "foreground", thresholds.foreground))
    checks.append((DIM_SLOT, "dim", thresholds.dim))

    slots = list(palette.slots)
    issues = []

    for slot, role, required in checks:
        color, achieved, met = adjust_to_contrast(slots[slot], background, required, step)
        if slot in BRIGHT_SLOTS and color == slots[slot - 8]:
            color, achieved = _separate(color, background, achieved, bright_delta(mode))
            met = achieved >= required
        if color != slots[slot]:
            logger.debug(
                "slot %d (%s): %s -> %s, contrast %.2f",
                slot, role, slots[slot].hex, color.hex, achieved,
            )
        slots[slot] = color
        if not met:
            logger.info(
                "slot %d (%s) reached contrast %.2f of required %.2f",
                slot, role, achieved, required,
            )
            issues.append(ContrastUnattainable(slot, role, achieved, required))

    foreground = slots[fg_slot]
    enforced = dataclasses.replace(
        palette,
        slots=tuple(slots),
        foreground=foreground,
        cursor_color=foreground,
        selection_foreground=foreground,
    )
    return enforced, tuple(issues)


def _separate(
    color: Color,
    background: Color,
    ratio: float,
    delta: float,
) -> tuple[Color, float]:
    """Shift a bright variant off its normal color unless contrast would drop."""
    shifted = adjust_lightness(color, delta)
    shifted_ratio = contrast_ratio(shifted, background)
    if shifted_ratio < ratio:
        return color, ratio
    return shifted, shifted_ratio

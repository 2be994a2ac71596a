# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Slot assignment: map candidate colors onto the 16 ANSI slots.

Accent slots are filled by walking a fixed, ordered list of hue targets.
Each target takes the closest unused candidate by circular Oklch hue
distance. When no candidate is close enough, a color is synthesized
under an explicit policy:

    MATCH    closest chromatic candidate within 60°, used as-is (consumed)
    ROTATE   nearest candidate turned to the exact target hue (not consumed)
    DEFAULT  no candidates left: fixed lightness/chroma at the target hue

Base slots (0, 7, 8, 15) come from the darkest and lightest candidates at
fixed lightness targets. Bright accents (9-14) repeat slots 1-6 shifted
away from the background.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from nuri.schema import AnsiPalette, Color, ExtractedColor, ThemeMode
from nuri.pipeline.colorspace import hue_distance, oklch_color
from nuri.pipeline.detect import coerce_mode

logger = logging.getLogger(__name__)


# =============================================================================
# Accent Targets and Synthesis Policy
# =============================================================================


@dataclass(frozen=True, slots=True)
class HueTarget:
    """An accent hue and the palette slot it fills."""
    name: str
    hue: float
    slot: int


# Processing order matters: earlier targets claim candidates first.
ACCENT_TARGETS: tuple[HueTarget, ...] = (
    HueTarget("red", 25.0, 1),
    HueTarget("yellow", 90.0, 3),
    HueTarget("green", 145.0, 2),
    HueTarget("cyan", 195.0, 6),
    HueTarget("blue", 260.0, 4),
    HueTarget("magenta", 325.0, 5),
)


class SynthesisPolicy(Enum):
    """How an accent slot got its color."""
    MATCH = "match"
    ROTATE = "rotate"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class AccentChoice:
    """
    The outcome for one accent target.

    Attributes:
        target: The hue target
        color: Color placed in the target's slot
        policy: Which synthesis rule produced the color
        source: Index of the candidate used, None for DEFAULT
    """
    target: HueTarget
    color: Color
    policy: SynthesisPolicy
    source: Optional[int] = None


# Hue farther than this from the target is synthesized instead
MAX_MATCH_DISTANCE = 60.0

# Below this Oklch chroma a candidate's hue is noise
ACHROMATIC_CHROMA = 0.02

# Fallback accent when there is nothing to derive from
DEFAULT_LIGHTNESS = 0.6
DEFAULT_CHROMA = 0.15

# Bright variants: lightness shift away from the background (valid 0.10-0.15)
BRIGHT_DELTA = 0.12

# Selection background: keep 60% of slot 4's chroma, step toward background
SELECTION_CHROMA_SCALE = 0.6
SELECTION_LIGHTNESS_NUDGE = 0.05


# =============================================================================
# Base Slot Targets
# =============================================================================

# Dark themes: slot 0 is the background, slot 15 the foreground
DARK_BACKGROUND_MAX = 0.15
DARK_WHITE = 0.85
DARK_DIM = 0.40
DARK_FOREGROUND = 0.93

# Light themes mirror the dark targets: slot 15 is the background,
# slot 0 the foreground
LIGHT_BACKGROUND_MIN = 1.0 - DARK_BACKGROUND_MAX
LIGHT_BLACK = 1.0 - DARK_WHITE
LIGHT_DIM = 1.0 - DARK_DIM
LIGHT_FOREGROUND = 1.0 - DARK_FOREGROUND

_BACKGROUND_SLOT = {ThemeMode.DARK: 0, ThemeMode.LIGHT: 15}
_FOREGROUND_SLOT = {ThemeMode.DARK: 15, ThemeMode.LIGHT: 0}

# Stand-in for darkest/lightest when there are no candidates at all
_NEUTRAL = (0.5, 0.0, 0.0)


def background_slot(mode: ThemeMode) -> int:
    """Palette slot that serves as the background in ``mode``."""
    return _BACKGROUND_SLOT[mode]


def foreground_slot(mode: ThemeMode) -> int:
    """Palette slot that serves as the foreground in ``mode``."""
    return _FOREGROUND_SLOT[mode]


def bright_delta(mode: ThemeMode) -> float:
    """Signed lightness shift from a normal accent to its bright variant.

    Bright variants move away from the background: lighter on dark
    themes, darker on light themes.
    """
    return BRIGHT_DELTA if mode is ThemeMode.DARK else -BRIGHT_DELTA


# =============================================================================
# Candidates
# =============================================================================


@dataclass(frozen=True, slots=True)
class _Candidate:
    index: int
    color: Color
    weight: float
    L: float
    C: float
    H: float

    @property
    def is_achromatic(self) -> bool:
        return self.C < ACHROMATIC_CHROMA


def _describe(colors: Sequence[ExtractedColor]) -> list[_Candidate]:
    candidates = []
    for index, ec in enumerate(colors):
        L, C, H = ec.color.to_oklch()
        candidates.append(_Candidate(index, ec.color, ec.weight, L, C, H))
    return candidates


def _nearest(pool: Sequence[_Candidate], hue: float) -> _Candidate:
    """Closest candidate by hue; achromatic ones rank last, then heavier first."""
    return min(
        pool,
        key=lambda c: (c.is_achromatic, hue_distance(c.H, hue), -c.weight, c.index),
    )


# =============================================================================
# Accent Assignment
# =============================================================================


def choose_accents(colors: Sequence[ExtractedColor]) -> tuple[AccentChoice, ...]:
    """
    Resolve every accent target against the candidates.

    Targets are processed in ACCENT_TARGETS order. Greedy: a MATCH removes
    its candidate from the pool and is never revisited.

    Args:
        colors: Weighted candidates (any order; ties favor heavier)

    Returns:
        One AccentChoice per target, in processing order.
    """
    pool = _describe(colors)
    choices = []

    for target in ACCENT_TARGETS:
        choice = _choose_accent(target, pool)
        if choice.policy is SynthesisPolicy.MATCH:
            pool = [c for c in pool if c.index != choice.source]
        logger.debug(
            "%s (slot %d): %s from candidate %s",
            target.name, target.slot, choice.policy.value, choice.source,
        )
        choices.append(choice)

    return tuple(choices)


def _choose_accent(target: HueTarget, pool: Sequence[_Candidate]) -> AccentChoice:
    if not pool:
        color = oklch_color(DEFAULT_LIGHTNESS, DEFAULT_CHROMA, target.hue)
        return AccentChoice(target, color, SynthesisPolicy.DEFAULT)

    nearest = _nearest(pool, target.hue)

    if not nearest.is_achromatic and hue_distance(nearest.H, target.hue) <= MAX_MATCH_DISTANCE:
        return AccentChoice(target, nearest.color, SynthesisPolicy.MATCH, nearest.index)

    # A gray has no chroma worth keeping; give it the default saturation
    chroma = DEFAULT_CHROMA if nearest.is_achromatic else nearest.C
    color = oklch_color(nearest.L, chroma, target.hue)
    return AccentChoice(target, color, SynthesisPolicy.ROTATE, nearest.index)


def brighten(color: Color, delta: float = BRIGHT_DELTA) -> Color:
    """Bright variant: same hue and chroma, lightness shifted by ``delta``."""
    L, C, H = color.to_oklch()
    return oklch_color(L + delta, C, H)


# =============================================================================
# Base Slots and Special Colors
# =============================================================================


def _base_slots(pool: Sequence[_Candidate], mode: ThemeMode) -> dict[int, Color]:
    if pool:
        darkest = min(pool, key=lambda c: (c.L, c.index))
        lightest = max(pool, key=lambda c: (c.L, -c.index))
        dark = (darkest.L, darkest.C, darkest.H)
        light = (lightest.L, lightest.C, lightest.H)
    else:
        dark = light = _NEUTRAL

    def tone(source: tuple[float, float, float], lightness: float) -> Color:
        _, C, H = source
        return oklch_color(lightness, C, H)

    if mode is ThemeMode.DARK:
        return {
            0: tone(dark, min(dark[0], DARK_BACKGROUND_MAX)),
            7: tone(light, DARK_WHITE),
            8: tone(dark, DARK_DIM),
            15: tone(light, DARK_FOREGROUND),
        }
    return {
        0: tone(dark, LIGHT_FOREGROUND),
        7: tone(dark, LIGHT_BLACK),
        8: tone(light, LIGHT_DIM),
        15: tone(light, max(light[0], LIGHT_BACKGROUND_MIN)),
    }


def selection_background(accent: Color, background: Color) -> Color:
    """Muted accent, nudged toward the background's lightness."""
    L, C, H = accent.to_oklch()
    bg_lightness, _, _ = background.to_oklch()
    nudge = SELECTION_LIGHTNESS_NUDGE if bg_lightness > L else -SELECTION_LIGHTNESS_NUDGE
    return oklch_color(L + nudge, C * SELECTION_CHROMA_SCALE, H)


def assign_slots(
    colors: Sequence[ExtractedColor],
    mode: Union[ThemeMode, str],
) -> AnsiPalette:
    """
    Map candidate colors to the 16 ANSI slots plus special colors.

    Always returns a fully populated palette, synthesizing whatever the
    candidates cannot supply (including when there are none).

    Args:
        colors: Weighted candidates, typically ``Extraction.colors``
        mode: Dark or light theme

    Returns:
        AnsiPalette before contrast enforcement
    """
    mode = coerce_mode(mode)
    pool = _describe(colors)

    slots: dict[int, Color] = _base_slots(pool, mode)

    for choice in choose_accents(colors):
        slots[choice.target.slot] = choice.color

    for slot in range(1, 7):
        slots[slot + 8] = brighten(slots[slot], bright_delta(mode))

    background = slots[background_slot(mode)]
    foreground = slots[foreground_slot(mode)]

    return AnsiPalette(
        slots=tuple(slots[i] for i in range(16)),
        background=background,
        foreground=foreground,
        cursor_color=foreground,
        cursor_text=background,
        selection_background=selection_background(slots[4], background),
        selection_foreground=foreground,
    )

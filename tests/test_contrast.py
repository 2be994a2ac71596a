# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""Tests for WCAG contrast enforcement."""

import pytest

from nuri.schema import AnsiPalette, Color, ContrastThresholds, ExtractedColor, ThemeMode
from nuri.pipeline.assign import assign_slots
from nuri.pipeline.colorspace import adjust_lightness, contrast_ratio, hue_distance, oklch_color
from nuri.pipeline.contrast import (
    ACCENT_SLOTS,
    DIM_SLOT,
    LIGHTNESS_STEP,
    adjust_to_contrast,
    enforce_contrast,
)

BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
GRAY = Color(128, 128, 128)


def _palette(background, accent, foreground, dim, mode=ThemeMode.DARK):
    """Build a palette with every accent slot set to ``accent``."""
    bg_slot, fg_slot = (0, 15) if mode is ThemeMode.DARK else (15, 0)
    slots = [accent] * 16
    slots[bg_slot] = background
    slots[fg_slot] = foreground
    slots[DIM_SLOT] = dim
    slots[7] = foreground
    return AnsiPalette(
        slots=tuple(slots),
        background=background,
        foreground=foreground,
        cursor_color=foreground,
        cursor_text=background,
        selection_background=accent,
        selection_foreground=foreground,
    )


class TestAdjustToContrast:

    def test_compliant_color_untouched(self):
        color, ratio, met = adjust_to_contrast(WHITE, BLACK, 4.5, LIGHTNESS_STEP)
        assert color == WHITE
        assert ratio == pytest.approx(21.0, abs=0.01)
        assert met

    def test_moves_up_on_dark(self):
        start = Color(40, 40, 60)
        color, ratio, met = adjust_to_contrast(start, BLACK, 4.5, LIGHTNESS_STEP)
        assert met
        assert ratio >= 4.5
        assert color.to_oklch()[0] > start.to_oklch()[0]

    def test_moves_down_on_light(self):
        start = Color(230, 220, 200)
        color, ratio, met = adjust_to_contrast(start, WHITE, 4.5, -LIGHTNESS_STEP)
        assert met
        assert ratio >= 4.5
        assert color.to_oklch()[0] < start.to_oklch()[0]

    def test_stops_at_first_passing_step(self):
        start = Color(40, 40, 60)
        color, _, _ = adjust_to_contrast(start, BLACK, 4.5, LIGHTNESS_STEP)
        L_start = start.to_oklch()[0]
        L_end = color.to_oklch()[0]
        # One step less would not have passed
        steps = round((L_end - L_start) / LIGHTNESS_STEP)
        previous = adjust_lightness(start, LIGHTNESS_STEP * (steps - 1))
        assert contrast_ratio(previous, BLACK) < 4.5

    def test_unattainable_keeps_best(self):
        color, ratio, met = adjust_to_contrast(GRAY, GRAY, 21.0, LIGHTNESS_STEP)
        assert not met
        assert color == WHITE
        assert ratio == pytest.approx(contrast_ratio(WHITE, GRAY))


class TestEnforceContrast:

    def test_same_color_background_lifted(self):
        """An accent identical to a dark background is lifted until readable."""
        background = oklch_color(0.10, 0.05, 260.0)
        palette = _palette(background, background, WHITE, GRAY)
        assert contrast_ratio(palette.slots[1], background) == pytest.approx(1.0)

        enforced, issues = enforce_contrast(palette, ThemeMode.DARK)

        assert issues == ()
        for slot in ACCENT_SLOTS:
            assert contrast_ratio(enforced.slots[slot], background) >= 4.5

    def test_hue_preserved(self):
        background = oklch_color(0.10, 0.05, 260.0)
        accent = oklch_color(0.30, 0.10, 25.0)
        enforced, _ = enforce_contrast(_palette(background, accent, WHITE, GRAY), ThemeMode.DARK)
        _, _, H = enforced.slots[1].to_oklch()
        assert hue_distance(H, 25.0) < 5.0

    def test_light_mode_darkens(self):
        accent = Color(250, 240, 200)
        palette = _palette(WHITE, accent, BLACK, GRAY, mode=ThemeMode.LIGHT)

        enforced, issues = enforce_contrast(palette, ThemeMode.LIGHT)

        assert issues == ()
        for slot in ACCENT_SLOTS:
            assert contrast_ratio(enforced.slots[slot], WHITE) >= 4.5
            assert enforced.slots[slot].to_oklch()[0] < accent.to_oklch()[0]

    def test_compliant_palette_unchanged(self):
        palette = _palette(BLACK, WHITE, WHITE, WHITE)
        enforced, issues = enforce_contrast(palette, ThemeMode.DARK)
        assert enforced == palette
        assert issues == ()

    def test_background_never_changes(self):
        background = oklch_color(0.10, 0.05, 260.0)
        palette = _palette(background, background, GRAY, GRAY)
        enforced, _ = enforce_contrast(palette, ThemeMode.DARK)
        assert enforced.slots[0] == background
        assert enforced.background == background
        assert enforced.cursor_text == background

    def test_foreground_resynced(self):
        dim_fg = Color(60, 60, 60)
        palette = _palette(BLACK, WHITE, dim_fg, WHITE)

        enforced, issues = enforce_contrast(palette, ThemeMode.DARK)

        assert issues == ()
        assert enforced.slots[15] != dim_fg
        assert contrast_ratio(enforced.slots[15], BLACK) >= 7.0
        assert enforced.foreground == enforced.slots[15]
        assert enforced.cursor_color == enforced.slots[15]
        assert enforced.selection_foreground == enforced.slots[15]

    def test_dim_slot(self):
        palette = _palette(BLACK, WHITE, WHITE, Color(30, 30, 30))
        enforced, _ = enforce_contrast(palette, ThemeMode.DARK)
        assert contrast_ratio(enforced.slots[DIM_SLOT], BLACK) >= 3.0

    def test_custom_thresholds(self):
        gray = Color(112, 112, 112)
        palette = _palette(BLACK, gray, WHITE, WHITE)

        relaxed, issues = enforce_contrast(palette, ThemeMode.DARK, ContrastThresholds(accent=4.0))
        assert issues == ()
        assert relaxed.slots[1] == gray

        strict, _ = enforce_contrast(palette, ThemeMode.DARK)
        assert strict.slots[1] != gray
        assert contrast_ratio(strict.slots[1], BLACK) >= 4.5

    def test_input_not_mutated(self):
        background = oklch_color(0.10, 0.05, 260.0)
        palette = _palette(background, background, WHITE, GRAY)
        before = palette.to_dict()
        enforce_contrast(palette, ThemeMode.DARK)
        assert palette.to_dict() == before


class TestUnattainable:

    def _enforce_max(self, palette):
        return enforce_contrast(palette, ThemeMode.DARK, ContrastThresholds(accent=21.0))

    def test_reports_each_accent(self):
        background = oklch_color(0.10, 0.05, 260.0)
        _, issues = self._enforce_max(_palette(background, background, WHITE, GRAY))

        assert [issue.slot for issue in issues] == list(ACCENT_SLOTS)
        for issue in issues:
            assert issue.role == "accent"
            assert issue.required == 21.0
            assert issue.achieved < 21.0

    def test_best_is_white(self):
        background = oklch_color(0.10, 0.05, 260.0)
        enforced, issues = self._enforce_max(_palette(background, background, WHITE, GRAY))
        for slot in ACCENT_SLOTS:
            assert enforced.slots[slot] == WHITE
        assert issues[0].achieved == pytest.approx(contrast_ratio(WHITE, background))

    def test_idempotent(self):
        background = oklch_color(0.10, 0.05, 260.0)
        once, first = self._enforce_max(_palette(background, background, WHITE, GRAY))
        twice, second = self._enforce_max(once)
        assert twice == once
        assert second == first


class TestIdempotence:

    @pytest.mark.parametrize("mode", [ThemeMode.DARK, ThemeMode.LIGHT])
    def test_second_pass_changes_nothing(self, mode):
        candidates = [
            ExtractedColor(Color(30, 34, 48), 0.4),
            ExtractedColor(Color(200, 60, 50), 0.2),
            ExtractedColor(Color(90, 160, 220), 0.2),
            ExtractedColor(Color(230, 225, 210), 0.2),
        ]
        once, _ = enforce_contrast(assign_slots(candidates, mode), mode)
        twice, issues = enforce_contrast(once, mode)
        assert twice == once
        assert issues == ()


class TestBrightSeparation:

    @pytest.mark.parametrize("mode, background", [
        (ThemeMode.DARK, oklch_color(0.10, 0.05, 260.0)),
        (ThemeMode.LIGHT, oklch_color(0.95, 0.02, 90.0)),
    ])
    def test_bright_differs_from_normal(self, mode, background):
        """Normal and bright accents that converge on one color are pulled apart."""
        foreground = WHITE if mode is ThemeMode.DARK else BLACK
        palette = _palette(background, background, foreground, GRAY, mode=mode)

        enforced, issues = enforce_contrast(palette, mode)

        assert issues == ()
        for slot in range(1, 7):
            assert enforced.slots[slot + 8] != enforced.slots[slot]
            assert contrast_ratio(enforced.slots[slot + 8], background) >= (
                contrast_ratio(enforced.slots[slot], background)
            )

    def test_separated_palette_stable(self):
        background = oklch_color(0.95, 0.02, 90.0)
        palette = _palette(background, background, BLACK, GRAY, mode=ThemeMode.LIGHT)
        once, _ = enforce_contrast(palette, ThemeMode.LIGHT)
        twice, issues = enforce_contrast(once, ThemeMode.LIGHT)
        assert twice == once
        assert issues == ()

    def test_string_mode(self):
        background = oklch_color(0.95, 0.02, 90.0)
        palette = _palette(background, background, BLACK, GRAY, mode=ThemeMode.LIGHT)
        assert enforce_contrast(palette, "light") == enforce_contrast(palette, ThemeMode.LIGHT)

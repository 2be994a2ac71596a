# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""Tests for dark/light mode detection."""

import numpy as np
import pytest

from nuri.errors import InputError
from nuri.schema import ThemeMode
from nuri.pipeline.detect import coerce_mode, detect_mode
from nuri.pipeline.extract import prepare_pixels


def _solid_lab(r, g, b):
    return prepare_pixels(np.full((10, 10, 3), [r, g, b], dtype=np.uint8))


class TestDetectMode:

    def test_mid_gray_is_dark(self):
        assert detect_mode(_solid_lab(119, 119, 119)) is ThemeMode.DARK

    def test_black_is_dark(self):
        assert detect_mode(_solid_lab(0, 0, 0)) is ThemeMode.DARK

    def test_white_is_light(self):
        assert detect_mode(_solid_lab(255, 255, 255)) is ThemeMode.LIGHT

    def test_threshold_is_exclusive(self):
        lab = np.full((4, 3), [55.0, 0.0, 0.0])
        assert detect_mode(lab) is ThemeMode.DARK
        lab[:, 0] = 55.01
        assert detect_mode(lab) is ThemeMode.LIGHT

    def test_mean_not_majority(self):
        """One very bright pixel can outweigh several dim ones."""
        lab = np.array([[41.0, 0, 0], [41.0, 0, 0], [41.0, 0, 0], [100.0, 0, 0]])
        assert detect_mode(lab) is ThemeMode.LIGHT


class TestOverride:

    def test_override_wins(self):
        assert detect_mode(_solid_lab(0, 0, 0), override=ThemeMode.LIGHT) is ThemeMode.LIGHT
        assert detect_mode(_solid_lab(255, 255, 255), override=ThemeMode.DARK) is ThemeMode.DARK

    def test_override_skips_validation(self):
        assert detect_mode(np.zeros((0, 3)), override="dark") is ThemeMode.DARK

    @pytest.mark.parametrize("text", ["light", "LIGHT", "Light"])
    def test_string_override(self, text):
        assert detect_mode(_solid_lab(0, 0, 0), override=text) is ThemeMode.LIGHT

    def test_unknown_override(self):
        with pytest.raises(InputError, match="sepia"):
            detect_mode(_solid_lab(0, 0, 0), override="sepia")

    def test_empty_without_override(self):
        with pytest.raises(InputError):
            detect_mode(np.zeros((0, 3)))


class TestCoerceMode:

    def test_enum_passthrough(self):
        assert coerce_mode(ThemeMode.DARK) is ThemeMode.DARK

    def test_string(self):
        assert coerce_mode("dark") is ThemeMode.DARK

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Color pipeline for Nuri.

Every stage is a pure function of its inputs: no I/O, no global state.
"""

from nuri.pipeline.assign import SynthesisPolicy, assign_slots, choose_accents
from nuri.pipeline.contrast import enforce_contrast
from nuri.pipeline.detect import detect_mode
from nuri.pipeline.extract import extract_colors, prepare_pixels
from nuri.pipeline.generate import build_palette, generate_palette, generate_palette_from_lab

__all__ = [
    "generate_palette",
    "generate_palette_from_lab",
    "build_palette",
    "prepare_pixels",
    "extract_colors",
    "detect_mode",
    "assign_slots",
    "choose_accents",
    "SynthesisPolicy",
    "enforce_contrast",
]

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Color model: space conversions, luminance, contrast, tone edits.

Conversion chains:
    sRGB → Linear RGB → OKLab → OKLCH   (tone and hue edits)
    sRGB → Linear RGB → XYZ → CIE Lab   (clustering and ΔE)

References:
- OKLab: https://bottosson.github.io/posts/oklab/
- CIE Lab: D65 reference white, L in [0, 100]
- WCAG 2.0 relative luminance and contrast ratio

Array functions are vectorized over shape (..., 3). Color-level helpers
take and return ``Color`` values. Everything here is a pure function.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from nuri.schema import Color


# =============================================================================
# sRGB ↔ Linear RGB
# =============================================================================


def srgb_to_linear(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Undo the sRGB transfer curve for values in [0, 1]."""
    srgb = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        np.power((np.maximum(srgb, 0.0) + 0.055) / 1.055, 2.4),
    )


def linear_to_srgb(linear: NDArray[np.float64]) -> NDArray[np.float64]:
    """Apply the sRGB transfer curve; result is clipped to [0, 1]."""
    linear = np.maximum(np.asarray(linear, dtype=np.float64), 0.0)
    srgb = np.where(
        linear <= 0.0031308,
        linear * 12.92,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )
    return np.clip(srgb, 0.0, 1.0)


# =============================================================================
# Linear RGB ↔ OKLab ↔ OKLCH
# =============================================================================

# Linear sRGB to LMS (cone responses)
_M1 = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
], dtype=np.float64)

# LMS to OKLab
_M2 = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
], dtype=np.float64)

_M1_INV = np.linalg.inv(_M1)
_M2_INV = np.linalg.inv(_M2)


def linear_rgb_to_oklab(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Linear RGB (..., 3) to OKLab (L, a, b)."""
    lms = np.einsum('...j,ij->...i', np.asarray(rgb, dtype=np.float64), _M1)
    return np.einsum('...j,ij->...i', np.cbrt(lms), _M2)


def oklab_to_linear_rgb(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """OKLab (..., 3) to linear RGB. May leave [0, 1] for out-of-gamut input."""
    lms_cbrt = np.einsum('...j,ij->...i', np.asarray(lab, dtype=np.float64), _M2_INV)
    return np.einsum('...j,ij->...i', lms_cbrt ** 3, _M1_INV)


def oklab_to_oklch(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """OKLab to OKLCH; hue in degrees [0, 360)."""
    lab = np.asarray(lab, dtype=np.float64)
    a, b = lab[..., 1], lab[..., 2]
    C = np.hypot(a, b)
    H = np.degrees(np.arctan2(b, a)) % 360.0
    return np.stack([lab[..., 0], C, H], axis=-1)


def oklch_to_oklab(lch: NDArray[np.float64]) -> NDArray[np.float64]:
    """OKLCH (hue in degrees) to OKLab."""
    lch = np.asarray(lch, dtype=np.float64)
    C = lch[..., 1]
    H_rad = np.radians(lch[..., 2])
    return np.stack([lch[..., 0], C * np.cos(H_rad), C * np.sin(H_rad)], axis=-1)


def srgb_to_oklch(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert sRGB [0,1] to OKLCH.

    Returns:
        Array of shape (..., 3):
        - L: Lightness [0, 1]
        - C: Chroma [0, ~0.32 for sRGB gamut]
        - H: Hue in degrees [0, 360)
    """
    return oklab_to_oklch(linear_rgb_to_oklab(srgb_to_linear(srgb)))


def oklch_to_srgb(lch: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert OKLCH to sRGB [0,1], clipping each channel to the gamut."""
    return linear_to_srgb(oklab_to_linear_rgb(oklch_to_oklab(lch)))


# =============================================================================
# Linear RGB ↔ XYZ ↔ CIE Lab
# =============================================================================

_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
], dtype=np.float64)

_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)

# D65 reference white
_WHITE = np.array([0.95047, 1.0, 1.08883], dtype=np.float64)

_DELTA = 6.0 / 29.0


def linear_rgb_to_xyz(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Linear sRGB to CIE XYZ (D65)."""
    return np.einsum('...j,ij->...i', np.asarray(rgb, dtype=np.float64), _RGB_TO_XYZ)


def xyz_to_linear_rgb(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    """CIE XYZ (D65) to linear sRGB."""
    return np.einsum('...j,ij->...i', np.asarray(xyz, dtype=np.float64), _XYZ_TO_RGB)


def xyz_to_lab(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    """CIE XYZ to CIE Lab."""
    t = np.asarray(xyz, dtype=np.float64) / _WHITE
    f = np.where(t > _DELTA ** 3, np.cbrt(t), t / (3.0 * _DELTA ** 2) + 4.0 / 29.0)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]
    return np.stack([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)], axis=-1)


def lab_to_xyz(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """CIE Lab to CIE XYZ."""
    lab = np.asarray(lab, dtype=np.float64)
    fy = (lab[..., 0] + 16.0) / 116.0
    f = np.stack([fy + lab[..., 1] / 500.0, fy, fy - lab[..., 2] / 200.0], axis=-1)
    t = np.where(f > _DELTA, f ** 3, 3.0 * _DELTA ** 2 * (f - 4.0 / 29.0))
    return t * _WHITE


def srgb_to_lab(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert sRGB [0,1] to CIE Lab."""
    return xyz_to_lab(linear_rgb_to_xyz(srgb_to_linear(srgb)))


def lab_to_srgb(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert CIE Lab to sRGB [0,1], clipped to the gamut."""
    return linear_to_srgb(xyz_to_linear_rgb(lab_to_xyz(lab)))


def srgb_uint8_to_lab(pixels: NDArray[np.uint8]) -> NDArray[np.float64]:
    """
    Convert uint8 sRGB pixels [0,255] to CIE Lab.

    Args:
        pixels: Array of shape (..., 3) with uint8 sRGB values

    Returns:
        Array of shape (..., 3) with Lab values
    """
    return srgb_to_lab(pixels.astype(np.float64) / 255.0)


# =============================================================================
# Distances
# =============================================================================


def delta_e_lab(lab1: NDArray[np.float64], lab2: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Euclidean ΔE between CIE Lab colors (CIE76).

    Reference thresholds (Lab units, 0-100 scale):
    - ΔE ≈ 2.3: just noticeable
    - ΔE < 5: same color for palette purposes
    - ΔE > 10: clearly different colors
    """
    delta = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    return np.sqrt(np.sum(delta ** 2, axis=-1))


def hue_distance(h1: float, h2: float) -> float:
    """Circular distance between two hues in degrees, in [0, 180]."""
    d = abs(h1 - h2) % 360.0
    return min(d, 360.0 - d)


# =============================================================================
# WCAG Luminance and Contrast
# =============================================================================

_LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def relative_luminance(color: Color) -> float:
    """
    WCAG 2.0 relative luminance in [0, 1].

    Uses the WCAG linearization threshold (0.03928) rather than the sRGB
    specification's 0.04045; the two agree to within 8-bit precision.
    """
    v = color.to_srgb()
    linear = np.where(v <= 0.03928, v / 12.92, ((v + 0.055) / 1.055) ** 2.4)
    return float(np.dot(linear, _LUMINANCE_WEIGHTS))


def contrast_ratio(c1: Color, c2: Color) -> float:
    """WCAG 2.0 contrast ratio, symmetric, in [1, 21]."""
    l1 = relative_luminance(c1)
    l2 = relative_luminance(c2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


# =============================================================================
# Gamut-aware Oklch Edits
# =============================================================================

# Upper bound for sRGB chroma at any lightness/hue
_CHROMA_CEILING = 0.4

_GAMUT_TOLERANCE = 1e-6

_BISECTION_STEPS = 24


def _in_gamut(L: float, C: float, H: float) -> bool:
    rgb = oklab_to_linear_rgb(oklch_to_oklab(np.array([L, C, H], dtype=np.float64)))
    return bool(np.all(rgb >= -_GAMUT_TOLERANCE) and np.all(rgb <= 1.0 + _GAMUT_TOLERANCE))


def max_chroma(L: float, H: float) -> float:
    """
    Largest Oklch chroma at lightness L and hue H that stays inside sRGB.

    Black and white have no room for chroma; everything between is found
    by bisection.
    """
    if L <= 0.0 or L >= 1.0:
        return 0.0
    if _in_gamut(L, _CHROMA_CEILING, H):
        return _CHROMA_CEILING
    lo, hi = 0.0, _CHROMA_CEILING
    for _ in range(_BISECTION_STEPS):
        mid = (lo + hi) / 2.0
        if _in_gamut(L, mid, H):
            lo = mid
        else:
            hi = mid
    return lo


def oklch_color(L: float, C: float, H: float) -> Color:
    """
    Build a color from Oklch, mapping into sRGB by reducing chroma.

    Lightness is clamped to [0, 1] and chroma to [0, max_chroma(L, H)].
    Hue is kept exactly, unlike per-channel clipping.
    """
    L = float(np.clip(L, 0.0, 1.0))
    C = max(0.0, float(C))
    H = float(H) % 360.0
    if not _in_gamut(L, C, H):
        C = min(C, max_chroma(L, H))
    return Color.from_oklch(L, C, H)


def with_oklch(
    color: Color,
    L: Optional[float] = None,
    C: Optional[float] = None,
    H: Optional[float] = None,
) -> Color:
    """Replace any Oklch component of a color, keeping the others."""
    L0, C0, H0 = color.to_oklch()
    return oklch_color(
        L0 if L is None else L,
        C0 if C is None else C,
        H0 if H is None else H,
    )


def adjust_lightness(color: Color, delta: float) -> Color:
    """
    Shift Oklch lightness by ``delta`` (positive = lighter).

    Lightness is clamped to [0, 1]; hue and chroma are kept except where
    the chroma no longer fits the gamut at the new lightness.
    """
    L, _, _ = color.to_oklch()
    return with_oklch(color, L=L + delta)


def adjust_chroma(color: Color, delta: float) -> Color:
    """
    Shift Oklch chroma by ``delta`` (positive = more saturated).

    Chroma is clamped to [0, max in-gamut chroma for the color's
    lightness and hue], so the result never clips on reconversion.
    """
    _, C, _ = color.to_oklch()
    return with_oklch(color, C=C + delta)

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Candidate color extraction using k-means clustering in CIE Lab.

Steps:
1. K-means: Cluster Lab pixels into at most K weighted centroids
2. Merge: Collapse centroids closer than ΔE 5.0 into one candidate

The result is an ``Extraction``: candidates ordered by weight, plus any
non-fatal diagnostics. It depends only on (pixels, K, seed), so callers
may cache it and rebuild palettes from it as often as they like.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from nuri.errors import DegenerateClusteringError, InputError
from nuri.schema import (
    Color,
    Diagnostic,
    ExtractedColor,
    Extraction,
    FewDistinctColors,
    LowPixelCount,
)
from nuri.pipeline.colorspace import delta_e_lab, srgb_uint8_to_lab

logger = logging.getLogger(__name__)

DEFAULT_CLUSTERS = 16
DEFAULT_SEED = 42

# K-means stops once no centroid moves this far (Lab units)
CONVERGENCE_DISTANCE = 5.0
MAX_ITERATIONS = 20

# Centroids closer than this are the same palette color
MERGE_DELTA_E = 5.0

# Below these counts the result is still returned, with a diagnostic
MIN_PIXELS = 16
MIN_DISTINCT_COLORS = 8


def prepare_pixels(pixels: NDArray[np.uint8]) -> NDArray[np.float64]:
    """
    Flatten decoded sRGB pixels and convert them to CIE Lab.

    Decoding and resizing happen upstream; this only validates and
    converts what it is given.

    Args:
        pixels: uint8 array of shape (H, W, 3) or (N, 3)

    Returns:
        Array of shape (N, 3) with Lab values

    Raises:
        InputError: If the array is not uint8 RGB data or is empty
    """
    if not isinstance(pixels, np.ndarray):
        raise InputError(f"Expected numpy array, got {type(pixels).__name__}")

    if pixels.ndim == 3 and pixels.shape[2] == 3:
        flat = pixels.reshape(-1, 3)
    elif pixels.ndim == 2 and pixels.shape[1] == 3:
        flat = pixels
    else:
        raise InputError(f"Expected (H, W, 3) or (N, 3) array, got shape {pixels.shape}")

    if pixels.dtype != np.uint8:
        raise InputError(f"Expected uint8 array, got {pixels.dtype}")

    if len(flat) == 0:
        raise InputError("Cannot extract colors from empty pixel array")

    return srgb_uint8_to_lab(flat)


def validate_lab_pixels(lab_pixels: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Check Lab pixel data and return it as a float (N, 3) array.

    Raises:
        InputError: If the data is empty, ragged, not 3-channel, or
            contains non-finite values
    """
    try:
        data = np.asarray(lab_pixels, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InputError(f"Malformed Lab pixel data: {e}") from e

    if data.ndim != 2 or data.shape[1] != 3:
        raise InputError(f"Expected (N, 3) Lab array, got shape {data.shape}")

    if len(data) == 0:
        raise InputError("Cannot extract colors from empty pixel array")

    if not np.all(np.isfinite(data)):
        raise InputError("Lab pixel data contains NaN or infinite values")

    return data


def extract_colors(
    lab_pixels: NDArray[np.float64],
    k: int = DEFAULT_CLUSTERS,
    seed: Optional[int] = DEFAULT_SEED,
) -> Extraction:
    """
    Extract weighted candidate colors from Lab pixels.

    Args:
        lab_pixels: Array of shape (N, 3) with CIE Lab values
        k: Number of clusters (may return fewer if the image has fewer
            unique colors, or after merging)
        seed: Seed for centroid initialization. The default makes runs
            reproducible; pass a new seed to regenerate, or None for
            fresh entropy.

    Returns:
        Extraction with candidates ordered by weight descending.

    Raises:
        InputError: Empty or malformed pixels, or k < 1
        DegenerateClusteringError: No cluster could be formed
    """
    data = validate_lab_pixels(lab_pixels)

    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise InputError(f"Cluster count must be a positive integer, got {k!r}")

    n_pixels = len(data)
    diagnostics: list[Diagnostic] = []

    if n_pixels < MIN_PIXELS:
        logger.info("only %d pixels; palette will carry little detail", n_pixels)
        diagnostics.append(LowPixelCount(pixel_count=n_pixels, minimum=MIN_PIXELS))

    centroids, labels = _kmeans(data, k=int(k), seed=seed)

    counts = np.bincount(labels, minlength=len(centroids))
    merged = merge_similar(centroids, counts / n_pixels)

    if not merged:
        raise DegenerateClusteringError("Clustering produced no colors")

    if len(merged) < MIN_DISTINCT_COLORS:
        logger.info(
            "%d distinct colors after merging; missing hues will be synthesized",
            len(merged),
        )
        diagnostics.append(
            FewDistinctColors(distinct_colors=len(merged), minimum=MIN_DISTINCT_COLORS)
        )

    colors = tuple(
        ExtractedColor(
            color=Color.from_lab(*position),
            weight=min(float(weight), 1.0),
        )
        for position, weight, _ in merged
    )

    return Extraction(colors=colors, diagnostics=tuple(diagnostics))


def merge_similar(
    centroids: NDArray[np.float64],
    weights: NDArray[np.float64],
    threshold: float = MERGE_DELTA_E,
) -> list[tuple[NDArray[np.float64], float, int]]:
    """
    Merge centroids closer than ``threshold`` in Lab.

    Centroids are ranked by weight descending, then by original index.
    The first pair in that ranking closer than the threshold is merged
    into its weight-averaged position with the summed weight, keeping
    the smaller index, and the ranking is rebuilt. This repeats until no
    pair is close, so the outcome is fixed for a given input regardless
    of how the centroids were computed.

    Zero-weight centroids (empty clusters) are dropped first.

    Args:
        centroids: Array of shape (K, 3) with Lab positions
        weights: Array of shape (K,) with pixel fractions

    Returns:
        List of (position, weight, original index), ordered by weight
        descending, then index.
    """
    pool = [
        (np.asarray(centroids[i], dtype=np.float64), float(weights[i]), i)
        for i in range(len(centroids))
        if weights[i] > 0
    ]

    while True:
        pool.sort(key=lambda entry: (-entry[1], entry[2]))
        pair = _first_close_pair(pool, threshold)
        if pair is None:
            return pool

        i, j = pair
        (pos_i, w_i, idx_i), (pos_j, w_j, idx_j) = pool[i], pool[j]
        total = w_i + w_j
        merged = ((pos_i * w_i + pos_j * w_j) / total, total, min(idx_i, idx_j))
        logger.debug("merging centroid %d into %d (ΔE < %.1f)", idx_j, idx_i, threshold)

        pool = [entry for n, entry in enumerate(pool) if n not in (i, j)]
        pool.append(merged)


def _first_close_pair(
    pool: list[tuple[NDArray[np.float64], float, int]],
    threshold: float,
) -> Optional[tuple[int, int]]:
    for i in range(len(pool)):
        for j in range(i + 1, len(pool)):
            if delta_e_lab(pool[i][0], pool[j][0]) < threshold:
                return i, j
    return None


def _kmeans(
    data: NDArray[np.float64],
    k: int,
    seed: Optional[int] = None,
) -> tuple[NDArray[np.float64], NDArray[np.int64]]:
    """
    Vectorized k-means with k-means++ initialization.

    Iterates until the largest centroid shift is below
    CONVERGENCE_DISTANCE or MAX_ITERATIONS have run.

    Args:
        data: Array of shape (N, 3)
        k: Number of clusters
        seed: Random seed

    Returns:
        (centroids, labels) where:
        - centroids: (k, 3) array of cluster centers, each the mean of
          the pixels carrying its label
        - labels: (N,) array of cluster assignments
    """
    rng = np.random.default_rng(seed)
    n, d = data.shape

    # Seeding draws from unique points so duplicates cannot be picked twice
    unique_data = np.unique(data, axis=0)
    n_unique = len(unique_data)

    k = min(k, n_unique)

    if k == 0:
        raise DegenerateClusteringError("No valid data points for clustering")

    centroids = np.empty((k, d), dtype=np.float64)
    centroids[0] = unique_data[rng.integers(n_unique)]

    for i in range(1, k):
        dists = np.min(
            np.sum((unique_data[:, np.newaxis, :] - centroids[np.newaxis, :i, :]) ** 2, axis=2),
            axis=1,
        )
        total = dists.sum()
        if total == 0:
            centroids[i] = unique_data[rng.integers(n_unique)]
        else:
            centroids[i] = unique_data[rng.choice(n_unique, p=dists / total)]

    labels = np.zeros(n, dtype=np.int64)

    for iteration in range(MAX_ITERATIONS):
        dists = np.sum((data[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2, axis=2)
        labels = np.argmin(dists, axis=1)

        updated = centroids.copy()
        for j in range(k):
            mask = labels == j
            if np.any(mask):
                updated[j] = data[mask].mean(axis=0)

        shift = float(np.max(np.sqrt(np.sum((updated - centroids) ** 2, axis=1))))
        centroids = updated

        if shift < CONVERGENCE_DISTANCE:
            logger.debug("k-means converged after %d iterations", iteration + 1)
            break

    return centroids, labels

# Copyright (c) 2026 Nuri
# SPDX-License-Identifier: MIT

"""
Fatal error taxonomy.

Fatal conditions abort a pipeline run and are raised as exceptions.
Non-fatal conditions are never raised: they travel beside the result as
diagnostic records (see ``nuri.schema.diagnostics``).
"""

from __future__ import annotations


class NuriError(Exception):
    """Base class for all fatal pipeline errors."""


class InputError(NuriError, ValueError):
    """Pixel data or configuration is empty or malformed."""


class DegenerateClusteringError(NuriError, ValueError):
    """Clustering produced no usable colors at all."""


__all__ = ["NuriError", "InputError", "DegenerateClusteringError"]

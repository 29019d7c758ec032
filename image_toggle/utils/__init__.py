# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Utility modules for metrics."""

from .metrics import PerformanceTracker, RateMeter


__all__ = [
    "PerformanceTracker",
    "RateMeter",
]

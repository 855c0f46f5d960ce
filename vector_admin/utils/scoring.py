"""Relevance score normalization for similarity search results.

Every backend reports closeness in its own units.  Callers want one
"higher is better" number in ``[0, 1]``, so each connector declares which
kind of number its backend returns and the helpers below map it:

* :attr:`ScoreMetric.SIMILARITY` -- the raw value already grows with
  relevance (inner product, cosine similarity).  It is clamped only.
* :attr:`ScoreMetric.DISTANCE` -- the raw value shrinks with relevance
  (cosine distance, L2).  It is inverted as ``1 - d`` and then clamped.

The clamp alone does not invert anything: a connector that reports a
distance but declares ``SIMILARITY`` ranks its hits backwards.
"""

from __future__ import annotations

from enum import Enum


class ScoreMetric(str, Enum):
    """Native orientation of a backend's closeness value."""

    SIMILARITY = "similarity"
    DISTANCE = "distance"


def normalize_score(value: float | int | None) -> float:
    """Clamp *value* into ``[0, 1]``, passing in-range values through.

    Non-numeric input (``None``, strings, NaN) scores ``0.0``.

    >>> normalize_score(1.5), normalize_score(-0.2), normalize_score(0.42)
    (1.0, 0.0, 0.42)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if value != value:  # NaN
        return 0.0
    if value >= 1.0:
        return 1.0
    if value <= 0:
        return 0.0
    return float(value)


def distance_to_score(value: float | int | None, metric: ScoreMetric) -> float:
    """Map a raw backend closeness value to a normalized relevance score."""
    if metric is ScoreMetric.DISTANCE and isinstance(value, (int, float)) and not isinstance(value, bool):
        return normalize_score(1.0 - value)
    return normalize_score(value)

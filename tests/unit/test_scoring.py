"""Unit tests for score normalization and batching helpers."""

from __future__ import annotations

import math

import pytest

from vector_admin.utils.batching import to_chunks
from vector_admin.utils.scoring import ScoreMetric, distance_to_score, normalize_score


class TestNormalizeScore:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(1.5, 1.0), (-0.2, 0.0), (0.42, 0.42), (1, 1.0), (0, 0.0)],
    )
    def test_clamps_and_passes_through(self, raw: float, expected: float) -> None:
        assert normalize_score(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "0.7", math.nan, True])
    def test_non_numeric_scores_zero(self, raw) -> None:  # noqa: ANN001
        assert normalize_score(raw) == 0.0


class TestDistanceToScore:
    def test_similarity_is_only_clamped(self) -> None:
        assert distance_to_score(0.8, ScoreMetric.SIMILARITY) == pytest.approx(0.8)

    def test_distance_is_inverted(self) -> None:
        assert distance_to_score(0.25, ScoreMetric.DISTANCE) == pytest.approx(0.75)

    def test_large_distance_floors_at_zero(self) -> None:
        assert distance_to_score(1.3, ScoreMetric.DISTANCE) == 0.0

    def test_missing_distance_scores_zero(self) -> None:
        assert distance_to_score(None, ScoreMetric.DISTANCE) == 0.0

    def test_closer_distance_ranks_higher(self) -> None:
        near = distance_to_score(0.1, ScoreMetric.DISTANCE)
        far = distance_to_score(0.6, ScoreMetric.DISTANCE)
        assert near > far


class TestToChunks:
    def test_last_chunk_may_be_short(self) -> None:
        assert list(to_chunks([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]

    def test_empty_yields_nothing(self) -> None:
        assert list(to_chunks([], 500)) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            list(to_chunks([1], 0))

from __future__ import annotations

import pytest

from riskengine.scoring.classification import (
    ALL_LEVELS,
    classify,
    classify_inherent,
    classify_residual,
    inherent_bucket_value,
    round_half_up,
)


class TestClassifyInherent:
    @pytest.mark.parametrize(
        "score, label, severity",
        [
            (0, "N/A", 0),
            (1, "Muito Baixo", 1),
            (3, "Muito Baixo", 1),
            (4, "Baixo", 2),
            (7, "Baixo", 2),
            (8, "Médio", 3),
            (10, "Médio", 3),
            (11, "Alto", 4),
            (15, "Alto", 4),
            (16, "Crítico", 5),
            (25, "Crítico", 5),
        ],
    )
    def test_boundaries(self, score: int, label: str, severity: int) -> None:
        level = classify_inherent(score)
        assert level.label == label
        assert level.severity == severity

    def test_negative_is_not_applicable(self) -> None:
        assert classify_inherent(-2).label == "N/A"

    def test_every_grid_product_is_classified(self) -> None:
        for probability in range(1, 6):
            for impact in range(1, 6):
                assert classify_inherent(probability * impact).severity >= 1

    def test_monotonic_over_grid(self) -> None:
        severities = [classify_inherent(score).severity for score in range(1, 26)]
        assert severities == sorted(severities)


class TestClassifyResidual:
    @pytest.mark.parametrize(
        "score, label",
        [
            (0, "Muito Baixo"),
            (3.0, "Muito Baixo"),
            (3.2, "Baixo"),
            (7.0, "Baixo"),
            (7.04, "Baixo"),
            (7.14, "Médio"),
            (7.16, "Médio"),
            (10.0, "Médio"),
            (12.0, "Alto"),
            (15.0, "Alto"),
            (15.04, "Alto"),
            (15.2, "Crítico"),
            (25.0, "Crítico"),
        ],
    )
    def test_boundaries(self, score: float, label: str) -> None:
        assert classify_residual(score).label == label

    def test_exact_threshold_falls_into_lower_bucket(self) -> None:
        assert classify_residual(15.0).severity == 4
        assert classify_inherent(15).severity == 4
        assert classify_inherent(16).severity == 5

    def test_negative_is_not_applicable(self) -> None:
        assert classify_residual(-0.5).severity == 0


class TestRoundHalfUp:
    def test_rounds_to_one_decimal(self) -> None:
        assert round_half_up(7.14) == 7.1
        assert round_half_up(7.16) == 7.2

    def test_half_rounds_up(self) -> None:
        assert round_half_up(2.25, 1) == 2.3
        assert round_half_up(0.5, 0) == 1.0


class TestClassify:
    def test_dispatches_on_scale(self) -> None:
        assert classify(10).label == "Médio"
        assert classify(10.5, residual=True).label == "Alto"


class TestBucketValue:
    @pytest.mark.parametrize(
        "score, bucket",
        [(0, 0), (1, 3), (3, 3), (4, 7), (7, 7), (8, 10), (10, 10), (11, 15), (15, 15), (16, 25), (25, 25)],
    )
    def test_buckets(self, score: int, bucket: int) -> None:
        assert inherent_bucket_value(score) == bucket

    def test_bucket_agrees_with_classifier(self) -> None:
        for score in range(0, 26):
            assert classify_inherent(inherent_bucket_value(score)).label == classify_inherent(score).label


def test_levels_are_ordered_by_severity() -> None:
    assert [level.severity for level in ALL_LEVELS] == [5, 4, 3, 2, 1, 0]

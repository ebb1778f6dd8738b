"""기술통계 / GPS 이동 감지 테스트."""

import pytest

from analytics.geo import haversine_distance, has_moved
from analytics.stats import calculate_stats, format_value, z_score


class TestCalculateStats:
    def test_basic(self):
        stats = calculate_stats([3.5, 4.5, 3.5, 4.5])
        assert stats.mean == pytest.approx(4.0)
        assert stats.std_dev == pytest.approx(0.5)
        assert stats.variance == pytest.approx(0.25)
        assert stats.min == 3.5
        assert stats.max == 4.5

    def test_population_variance(self):
        # 표본분산이면 2.5, 모분산이면 2.0
        stats = calculate_stats([1, 2, 3, 4, 5])
        assert stats.variance == pytest.approx(2.0)

    def test_empty_is_all_zero(self):
        stats = calculate_stats([])
        assert stats.mean == 0
        assert stats.std_dev == 0
        assert stats.variance == 0

    def test_accepts_generator(self):
        stats = calculate_stats(x for x in [1.0, 3.0])
        assert stats.mean == pytest.approx(2.0)

    def test_z_score_zero_std(self):
        assert z_score(10.0, calculate_stats([4.0] * 10)) == 0.0

    def test_z_score(self):
        assert z_score(6.0, calculate_stats([3.5, 4.5])) == pytest.approx(4.0)


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(8.0, "8"), (-18, "-18"), (7.5, "7.5"), (0.0, "0"), (-2.25, "-2.25")],
    )
    def test_format(self, value, expected):
        assert format_value(value) == expected


class TestGeo:
    def test_same_point_distance_zero(self):
        assert haversine_distance(36.7538, 3.0588, 36.7538, 3.0588) == pytest.approx(0.0)

    def test_one_millidegree_latitude(self):
        d = haversine_distance(36.7538, 3.0588, 36.7548, 3.0588)
        assert d == pytest.approx(111.19, rel=1e-3)

    def test_same_point_not_moved(self):
        assert has_moved(36.7538, 3.0588, 36.7538, 3.0588, 100) is False

    def test_moved_150m(self):
        assert has_moved(36.7538, 3.0588, 36.7538 + 0.00135, 3.0588, 100) is True

    def test_within_threshold(self):
        assert has_moved(36.7538, 3.0588, 36.7538 + 0.00045, 3.0588, 100) is False

    def test_unknown_previous_position(self):
        assert has_moved(None, None, 36.7538, 3.0588) is False
        assert has_moved(36.7538, None, 36.7538, 3.0588) is False

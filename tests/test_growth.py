"""
Tests for the WHO reference tables and LMS calculations.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import math

import pytest
from scipy import stats


class TestReferenceTables:
    """Test reference data and LMS lookup."""

    def test_tables_cover_birth_to_24_months(self):
        from knowledge.growth import MeasurementType, Sex, get_reference_table

        for measurement_type in MeasurementType:
            for sex in Sex:
                table = get_reference_table(measurement_type, sex)
                assert [row.age_months for row in table] == list(range(25))
                assert all(row.M > 0 and row.S > 0 for row in table)

    def test_exact_month_returns_table_row(self):
        from knowledge.growth import LMSParams, MeasurementType, Sex, get_lms_params

        lms = get_lms_params(MeasurementType.WEIGHT, Sex.MALE, 6)

        assert lms == LMSParams(L=0.1257, M=7.9340, S=0.10958)

    def test_every_integer_age_matches_row(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params, get_reference_table

        table = get_reference_table(MeasurementType.HEAD_CIRCUMFERENCE, Sex.FEMALE)
        for row in table:
            assert get_lms_params("head_circumference", "female", float(row.age_months)) == row.lms

    def test_half_month_is_between_rows(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params

        lo = get_lms_params(MeasurementType.WEIGHT, Sex.MALE, 3)
        hi = get_lms_params(MeasurementType.WEIGHT, Sex.MALE, 4)
        mid = get_lms_params(MeasurementType.WEIGHT, Sex.MALE, 3.5)

        for name in ("L", "M", "S"):
            a, b = getattr(lo, name), getattr(hi, name)
            assert min(a, b) < getattr(mid, name) < max(a, b)
        assert mid.M == pytest.approx((6.3762 + 7.0023) / 2)

    def test_interpolation_is_linear(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params

        lms = get_lms_params(MeasurementType.HEIGHT, Sex.FEMALE, 10.25)

        assert lms.L == pytest.approx(1.0)
        assert lms.M == pytest.approx(71.4818 + (72.771 - 71.4818) * 0.25)
        assert lms.S == pytest.approx(0.03452 + (0.03464 - 0.03452) * 0.25)

    def test_ages_past_table_use_last_row(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params

        for measurement_type in MeasurementType:
            assert get_lms_params(measurement_type, Sex.MALE, 30) == get_lms_params(
                measurement_type, Sex.MALE, 24
            )
        assert get_lms_params(MeasurementType.WEIGHT, Sex.FEMALE, 24.5).M == 11.4775

    def test_infinite_age_uses_last_row(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params

        assert get_lms_params(MeasurementType.HEIGHT, Sex.FEMALE, float("inf")) == get_lms_params(
            MeasurementType.HEIGHT, Sex.FEMALE, 24
        )

    def test_negative_age_has_no_params(self):
        from knowledge.growth import MeasurementType, Sex, get_lms_params

        assert get_lms_params(MeasurementType.WEIGHT, Sex.MALE, -0.1) is None
        assert get_lms_params(MeasurementType.WEIGHT, Sex.MALE, float("nan")) is None


class TestNormalDistribution:
    """Test the closed-form normal CDF and quantile."""

    def test_cdf_matches_scipy(self):
        from knowledge.growth import normal_cdf

        for i in range(-800, 801):
            z = i / 100
            assert abs(normal_cdf(z) - stats.norm.cdf(z)) < 1e-7

    def test_cdf_reflection(self):
        from knowledge.growth import normal_cdf

        for z in (0.3, 1.0, 1.96, 3.5):
            assert normal_cdf(-z) == pytest.approx(1 - normal_cdf(z), abs=1e-12)

    def test_cdf_extremes(self):
        from knowledge.growth import normal_cdf

        assert normal_cdf(40) == 1.0
        assert normal_cdf(-40) == 0.0

    def test_quantile_matches_scipy(self):
        from knowledge.growth import normal_quantile

        probabilities = [0.0001, 0.001, 0.01, 0.02, 0.024, 0.03, 0.1, 0.25, 0.5,
                         0.75, 0.9, 0.97, 0.976, 0.99, 0.999, 0.9999]
        for p in probabilities:
            assert normal_quantile(p) == pytest.approx(stats.norm.ppf(p), abs=1e-6)

    def test_quantile_bounds(self):
        from knowledge.growth import normal_quantile

        assert normal_quantile(0) == -math.inf
        assert normal_quantile(1) == math.inf
        assert normal_quantile(0.5) == 0.0


class TestLMS:
    """Test Z-score and percentile transforms."""

    def test_median_is_50th_percentile(self):
        from knowledge.growth import LMSParams, percentile_from_z, z_score_from_lms

        lms = LMSParams(L=0.1257, M=7.9340, S=0.10958)
        z = z_score_from_lms(7.934, lms)

        assert z == pytest.approx(0, abs=1e-12)
        assert percentile_from_z(z) == 50.0

    def test_heavy_infant_above_90th(self):
        from knowledge.growth import LMSParams, percentile_from_z, z_score_from_lms

        lms = LMSParams(L=0.1257, M=7.9340, S=0.10958)

        assert percentile_from_z(z_score_from_lms(10.0, lms)) > 90

    def test_log_branch_for_small_l(self):
        from knowledge.growth import LMSParams, value_from_lms_z, z_score_from_lms

        lms = LMSParams(L=0.0004, M=11.9514, S=0.11369)
        expected = math.log(13.0 / 11.9514) / 0.11369

        assert z_score_from_lms(13.0, lms) == pytest.approx(expected)
        assert value_from_lms_z(1.0, lms) == pytest.approx(11.9514 * math.exp(0.11369))

    @pytest.mark.parametrize("L", [-0.3, 0.0005, 0.1257, 1.0, 1.8])
    def test_round_trip(self, L):
        from knowledge.growth import LMSParams, value_from_lms_z, z_score_from_lms

        lms = LMSParams(L=L, M=10.0, S=0.12)
        for measurement in (6.5, 8.0, 10.0, 12.5, 16.0):
            z = z_score_from_lms(measurement, lms)
            assert z_score_from_lms(value_from_lms_z(z, lms), lms) == pytest.approx(z, abs=1e-6)
            assert value_from_lms_z(z, lms) == pytest.approx(measurement)

    def test_value_beyond_transform_range(self):
        from knowledge.growth import LMSParams, value_from_lms_z

        assert value_from_lms_z(-20, LMSParams(L=1.0, M=50.0, S=0.05)) == 0.0
        assert value_from_lms_z(20, LMSParams(L=-1.0, M=10.0, S=0.1)) == math.inf

    def test_percentile_symmetry(self):
        from knowledge.growth import percentile_from_z

        assert percentile_from_z(0) == 50.0
        for z in (0.1, 0.5, 1.0, 1.645, 2.5, 4.0):
            assert percentile_from_z(z) + percentile_from_z(-z) == pytest.approx(100.0, abs=0.1 + 1e-9)

    def test_percentile_stays_in_range(self):
        from knowledge.growth import percentile_from_z

        assert percentile_from_z(12) == 100.0
        assert percentile_from_z(-12) == 0.0

    def test_percentile_increases_with_measurement(self):
        from knowledge.growth import MeasurementType, Sex, calculate_percentile

        results = [
            calculate_percentile(MeasurementType.WEIGHT, kg, 6, Sex.MALE)
            for kg in (6.0, 7.0, 8.0, 9.0)
        ]
        percentiles = [r.percentile for r in results]
        z_scores = [r.z_score for r in results]

        assert percentiles == sorted(set(percentiles))
        assert z_scores == sorted(set(z_scores))

    def test_calculate_percentile_rounding_and_interpretation(self):
        from knowledge.growth import MeasurementType, Sex, calculate_percentile

        result = calculate_percentile(MeasurementType.WEIGHT, 7.934, 6, Sex.MALE)

        assert result.percentile == 50.0
        assert result.z_score == 0.0
        assert result.interpretation == "Normal weight (25th-75th percentile)"

    def test_calculate_percentile_invalid_input(self):
        from knowledge.growth import MeasurementType, Sex, calculate_percentile

        assert calculate_percentile(MeasurementType.WEIGHT, 0, 6, Sex.MALE) is None
        assert calculate_percentile(MeasurementType.WEIGHT, -1.0, 6, Sex.MALE) is None
        assert calculate_percentile(MeasurementType.WEIGHT, None, 6, Sex.MALE) is None
        assert calculate_percentile(MeasurementType.WEIGHT, 7.0, -1, Sex.MALE) is None

    def test_interpret_percentile_bands(self):
        from knowledge.growth import interpret_percentile

        assert interpret_percentile(1.2, "length").startswith("Very low length")
        assert interpret_percentile(50, "weight").startswith("Normal weight")
        assert interpret_percentile(98.5, "head circumference").startswith("Very high")


class TestCharts:
    """Test percentile curve generation."""

    def test_weight_chart_first_three_months(self):
        from knowledge.growth import MeasurementType, Sex, generate_percentile_chart_data

        rows = generate_percentile_chart_data(MeasurementType.WEIGHT, Sex.MALE, 0, 2)

        assert [row.age_months for row in rows] == [0, 1, 2]
        for row, median in zip(rows, (3.3464, 4.4709, 5.5675)):
            assert abs(row.p50 - median) <= 0.02

    def test_default_range_is_0_to_24(self):
        from knowledge.growth import generate_percentile_chart_data

        rows = generate_percentile_chart_data("height", "female")

        assert len(rows) == 25
        assert rows[-1].age_months == 24

    def test_curves_increase_with_percentile(self):
        from knowledge.growth import (
            STANDARD_PERCENTILES,
            MeasurementType,
            Sex,
            generate_percentile_chart_data,
        )

        for measurement_type in MeasurementType:
            for row in generate_percentile_chart_data(measurement_type, Sex.FEMALE):
                values = [row.value_at(p) for p in STANDARD_PERCENTILES]
                assert all(a < b for a, b in zip(values, values[1:]))

    def test_values_rounded_to_two_decimals(self):
        from knowledge.growth import generate_percentile_chart_data

        row = generate_percentile_chart_data("head_circumference", "male", 12, 12)[0]

        for value in row.to_dict().values():
            assert round(value, 2) == value

    def test_months_without_params_are_skipped(self):
        from knowledge.growth import generate_percentile_chart_data

        rows = generate_percentile_chart_data("weight", "male", -2, 1)

        assert [row.age_months for row in rows] == [0, 1]

    def test_unknown_percentile_curve(self):
        from knowledge.growth import generate_percentile_chart_data

        row = generate_percentile_chart_data("weight", "male", 0, 0)[0]

        with pytest.raises(ValueError):
            row.value_at(42)


class TestRounding:
    """Test half-up rounding of reported values."""

    def test_ties_round_up(self):
        from knowledge.growth import round_half_up

        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(50.25, 1) == 50.3
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(-0.125, 2) == -0.12

    def test_non_ties(self):
        from knowledge.growth import round_half_up

        assert round_half_up(233.3333, 2) == 233.33
        assert round_half_up(7.934, 2) == 7.93
        assert round_half_up(-1.006, 2) == -1.01

    def test_non_finite_passes_through(self):
        import math
        from knowledge.growth import round_half_up

        assert round_half_up(math.inf, 2) == math.inf
        assert math.isnan(round_half_up(math.nan, 2))


class TestAge:
    """Test age helpers."""

    def test_fractional_months(self):
        from datetime import date
        from knowledge.growth import calculate_age_in_months

        assert calculate_age_in_months(date(2024, 1, 1), date(2024, 1, 1)) == 0.0
        assert calculate_age_in_months(date(2024, 1, 1), date(2024, 1, 16)) == pytest.approx(15 / 30.4375)

    def test_mixed_naive_and_aware(self):
        from datetime import date, datetime, timedelta, timezone
        from knowledge.growth import calculate_age_in_months

        measured = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(days=365.25)

        assert calculate_age_in_months(date(2024, 1, 1), measured) == pytest.approx(12.0)

    def test_as_utc(self):
        from datetime import date, datetime, timezone
        from knowledge.growth import as_utc

        assert as_utc(date(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert as_utc(datetime(2024, 3, 1, 10)).tzinfo is timezone.utc
        aware = datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
        assert as_utc(aware) is aware


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
WHO Child Growth Standards (2006) reference data, birth to 24 months.

Reference: https://www.who.int/tools/child-growth-standards

Each table holds one row per completed month of age:
    (age_months, L, M, S)

where L is the Box-Cox power, M the median and S the coefficient of
variation of the reference population at that age. Weight is in
kilograms, length/height and head circumference in centimeters.

The tables are module constants and are never mutated. Ages between two
tabulated months are linearly interpolated; ages past the last row reuse
the last row verbatim.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class MeasurementType(str, Enum):
    WEIGHT = "weight"
    HEIGHT = "height"
    HEAD_CIRCUMFERENCE = "head_circumference"

    @property
    def unit(self) -> str:
        """Reference unit of the table for this measurement."""
        return "kg" if self is MeasurementType.WEIGHT else "cm"


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class LMSParams:
    """Box-Cox power (L), median (M) and coefficient of variation (S)."""
    L: float
    M: float
    S: float


@dataclass(frozen=True)
class ReferenceRow:
    """One tabulated month of a growth standard."""
    age_months: int
    L: float
    M: float
    S: float

    @property
    def lms(self) -> LMSParams:
        return LMSParams(self.L, self.M, self.S)


def _rows(*rows: tuple[int, float, float, float]) -> tuple[ReferenceRow, ...]:
    table = tuple(ReferenceRow(*row) for row in rows)
    # Row index doubles as age in months
    assert all(row.age_months == i for i, row in enumerate(table))
    return table


# Weight-for-age (kg), Males
WEIGHT_FOR_AGE_MALE: tuple[ReferenceRow, ...] = _rows(
    (0, 0.3487, 3.3464, 0.14602),
    (1, 0.2297, 4.4709, 0.13395),
    (2, 0.1970, 5.5675, 0.12385),
    (3, 0.1738, 6.3762, 0.11727),
    (4, 0.1553, 7.0023, 0.11316),
    (5, 0.1395, 7.5105, 0.1108),
    (6, 0.1257, 7.9340, 0.10958),
    (7, 0.1134, 8.2970, 0.10902),
    (8, 0.1021, 8.6151, 0.10882),
    (9, 0.0917, 8.9014, 0.10881),
    (10, 0.0822, 9.1649, 0.10891),
    (11, 0.0733, 9.4122, 0.10906),
    (12, 0.0651, 9.6479, 0.10925),
    (13, 0.0573, 9.8749, 0.10949),
    (14, 0.0500, 10.0953, 0.10976),
    (15, 0.0432, 10.3108, 0.11007),
    (16, 0.0368, 10.5228, 0.11041),
    (17, 0.0307, 10.7319, 0.11079),
    (18, 0.0250, 10.9385, 0.11119),
    (19, 0.0196, 11.1430, 0.11164),
    (20, 0.0144, 11.3462, 0.11211),
    (21, 0.0095, 11.5486, 0.11261),
    (22, 0.0049, 11.7504, 0.11314),
    (23, 0.0004, 11.9514, 0.11369),
    (24, -0.0038, 12.1515, 0.11426),
)


# Weight-for-age (kg), Females
WEIGHT_FOR_AGE_FEMALE: tuple[ReferenceRow, ...] = _rows(
    (0, 0.3809, 3.2322, 0.14171),
    (1, 0.1714, 4.1873, 0.13724),
    (2, 0.0962, 5.1282, 0.13000),
    (3, 0.0402, 5.8458, 0.12619),
    (4, -0.0050, 6.4237, 0.12402),
    (5, -0.0430, 6.8985, 0.12274),
    (6, -0.0756, 7.2970, 0.12204),
    (7, -0.1039, 7.6422, 0.12178),
    (8, -0.1288, 7.9487, 0.12181),
    (9, -0.1507, 8.2254, 0.12199),
    (10, -0.1700, 8.4800, 0.12223),
    (11, -0.1872, 8.7192, 0.12247),
    (12, -0.2024, 8.9481, 0.12268),
    (13, -0.2158, 9.1699, 0.12283),
    (14, -0.2278, 9.3870, 0.12294),
    (15, -0.2384, 9.6008, 0.12299),
    (16, -0.2478, 9.8124, 0.12303),
    (17, -0.2562, 10.0226, 0.12306),
    (18, -0.2637, 10.2315, 0.12309),
    (19, -0.2703, 10.4393, 0.12315),
    (20, -0.2762, 10.6464, 0.12323),
    (21, -0.2815, 10.8534, 0.12335),
    (22, -0.2862, 11.0608, 0.12351),
    (23, -0.2903, 11.2688, 0.12371),
    (24, -0.2941, 11.4775, 0.12396),
)


# Length/Height-for-age (cm), Males
HEIGHT_FOR_AGE_MALE: tuple[ReferenceRow, ...] = _rows(
    (0, 1.0, 49.8842, 0.03795),
    (1, 1.0, 54.7244, 0.03557),
    (2, 1.0, 58.4249, 0.03424),
    (3, 1.0, 61.4292, 0.03328),
    (4, 1.0, 63.8860, 0.03257),
    (5, 1.0, 65.9026, 0.03204),
    (6, 1.0, 67.6236, 0.03165),
    (7, 1.0, 69.1645, 0.03139),
    (8, 1.0, 70.5994, 0.03124),
    (9, 1.0, 71.9687, 0.03117),
    (10, 1.0, 73.2812, 0.03118),
    (11, 1.0, 74.5388, 0.03125),
    (12, 1.0, 75.7488, 0.03137),
    (13, 1.0, 76.9186, 0.03154),
    (14, 1.0, 78.0497, 0.03174),
    (15, 1.0, 79.1458, 0.03197),
    (16, 1.0, 80.2113, 0.03222),
    (17, 1.0, 81.2487, 0.03248),
    (18, 1.0, 82.2587, 0.03276),
    (19, 1.0, 83.2418, 0.03306),
    (20, 1.0, 84.1996, 0.03336),
    (21, 1.0, 85.1348, 0.03366),
    (22, 1.0, 86.0477, 0.03396),
    (23, 1.0, 86.9410, 0.03426),
    (24, 1.0, 87.8161, 0.03455),
)


# Length/Height-for-age (cm), Females
HEIGHT_FOR_AGE_FEMALE: tuple[ReferenceRow, ...] = _rows(
    (0, 1.0, 49.1477, 0.0379),
    (1, 1.0, 53.6872, 0.0364),
    (2, 1.0, 57.0673, 0.03568),
    (3, 1.0, 59.8029, 0.0352),
    (4, 1.0, 62.0899, 0.03486),
    (5, 1.0, 64.0301, 0.03463),
    (6, 1.0, 65.7311, 0.03448),
    (7, 1.0, 67.2873, 0.03441),
    (8, 1.0, 68.7498, 0.0344),
    (9, 1.0, 70.1435, 0.03444),
    (10, 1.0, 71.4818, 0.03452),
    (11, 1.0, 72.771, 0.03464),
    (12, 1.0, 74.015, 0.03479),
    (13, 1.0, 75.2176, 0.03496),
    (14, 1.0, 76.3817, 0.03514),
    (15, 1.0, 77.5099, 0.03534),
    (16, 1.0, 78.6055, 0.03555),
    (17, 1.0, 79.671, 0.03576),
    (18, 1.0, 80.7079, 0.03598),
    (19, 1.0, 81.7182, 0.0362),
    (20, 1.0, 82.7036, 0.03643),
    (21, 1.0, 83.6654, 0.03666),
    (22, 1.0, 84.6040, 0.03688),
    (23, 1.0, 85.5202, 0.03711),
    (24, 1.0, 86.4153, 0.03734),
)


# Head circumference-for-age (cm), Males
HC_FOR_AGE_MALE: tuple[ReferenceRow, ...] = _rows(
    (0, 1.0, 34.4618, 0.03686),
    (1, 1.0, 37.2759, 0.03133),
    (2, 1.0, 39.1285, 0.02997),
    (3, 1.0, 40.5135, 0.02918),
    (4, 1.0, 41.6317, 0.02868),
    (5, 1.0, 42.5576, 0.02837),
    (6, 1.0, 43.3306, 0.02817),
    (7, 1.0, 43.9803, 0.02804),
    (8, 1.0, 44.53, 0.02796),
    (9, 1.0, 44.9998, 0.02792),
    (10, 1.0, 45.4051, 0.0279),
    (11, 1.0, 45.7573, 0.0279),
    (12, 1.0, 46.0661, 0.02791),
    (13, 1.0, 46.3395, 0.02793),
    (14, 1.0, 46.5844, 0.02795),
    (15, 1.0, 46.806, 0.02798),
    (16, 1.0, 47.0088, 0.02802),
    (17, 1.0, 47.1962, 0.02806),
    (18, 1.0, 47.3711, 0.0281),
    (19, 1.0, 47.5357, 0.02815),
    (20, 1.0, 47.6919, 0.0282),
    (21, 1.0, 47.8408, 0.02825),
    (22, 1.0, 47.9833, 0.0283),
    (23, 1.0, 48.1201, 0.02836),
    (24, 1.0, 48.2515, 0.02841),
)


# Head circumference-for-age (cm), Females
HC_FOR_AGE_FEMALE: tuple[ReferenceRow, ...] = _rows(
    (0, 1.0, 33.8787, 0.03496),
    (1, 1.0, 36.5463, 0.0321),
    (2, 1.0, 38.2521, 0.03168),
    (3, 1.0, 39.5328, 0.03111),
    (4, 1.0, 40.5817, 0.03067),
    (5, 1.0, 41.459, 0.03035),
    (6, 1.0, 42.1995, 0.03013),
    (7, 1.0, 42.829, 0.02998),
    (8, 1.0, 43.3671, 0.02989),
    (9, 1.0, 43.83, 0.02982),
    (10, 1.0, 44.2319, 0.02977),
    (11, 1.0, 44.5844, 0.02975),
    (12, 1.0, 44.8965, 0.02973),
    (13, 1.0, 45.1752, 0.02973),
    (14, 1.0, 45.4265, 0.02973),
    (15, 1.0, 45.6551, 0.02974),
    (16, 1.0, 45.865, 0.02975),
    (17, 1.0, 46.0598, 0.02977),
    (18, 1.0, 46.2424, 0.02979),
    (19, 1.0, 46.4152, 0.02982),
    (20, 1.0, 46.5801, 0.02985),
    (21, 1.0, 46.7384, 0.02988),
    (22, 1.0, 46.8913, 0.02991),
    (23, 1.0, 47.0391, 0.02995),
    (24, 1.0, 47.1822, 0.02998),
)

REFERENCE_TABLES: dict[tuple[MeasurementType, Sex], tuple[ReferenceRow, ...]] = {
    (MeasurementType.WEIGHT, Sex.MALE): WEIGHT_FOR_AGE_MALE,
    (MeasurementType.WEIGHT, Sex.FEMALE): WEIGHT_FOR_AGE_FEMALE,
    (MeasurementType.HEIGHT, Sex.MALE): HEIGHT_FOR_AGE_MALE,
    (MeasurementType.HEIGHT, Sex.FEMALE): HEIGHT_FOR_AGE_FEMALE,
    (MeasurementType.HEAD_CIRCUMFERENCE, Sex.MALE): HC_FOR_AGE_MALE,
    (MeasurementType.HEAD_CIRCUMFERENCE, Sex.FEMALE): HC_FOR_AGE_FEMALE,
}

MAX_AGE_MONTHS = 24


def get_reference_table(
    measurement_type: MeasurementType,
    sex: Sex,
) -> tuple[ReferenceRow, ...]:
    """Return the reference table for a measurement type and sex."""
    return REFERENCE_TABLES[(MeasurementType(measurement_type), Sex(sex))]


def get_lms_params(
    measurement_type: MeasurementType,
    sex: Sex,
    age_months: float,
) -> LMSParams | None:
    """
    Get LMS parameters for a possibly fractional age.

    Ages between whole months are linearly interpolated between the two
    bracketing rows, each of L, M and S independently. Ages past the end
    of the table reuse the last row unchanged.

    Args:
        measurement_type: weight, height or head_circumference
        sex: male or female
        age_months: Age in months (may be fractional)

    Returns:
        LMSParams, or None for a negative or NaN age. An infinite age
        gets the last row.
    """
    if math.isnan(age_months) or age_months < 0:
        return None

    table = get_reference_table(measurement_type, sex)

    if age_months > table[-1].age_months:
        logger.debug(
            "Age %.2f months is past the %s table; using the %d-month row",
            age_months, MeasurementType(measurement_type).value, table[-1].age_months,
        )
        return table[-1].lms

    lower = math.floor(age_months)
    upper = math.ceil(age_months)

    # Exact month
    if lower == upper or upper >= len(table):
        return table[min(lower, len(table) - 1)].lms

    lo = table[lower]
    hi = table[upper]
    t = age_months - lower

    return LMSParams(
        L=lo.L + (hi.L - lo.L) * t,
        M=lo.M + (hi.M - lo.M) * t,
        S=lo.S + (hi.S - lo.S) * t,
    )

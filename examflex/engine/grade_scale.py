"""
Grade Scale Module
Resolves grade and grade point from a percentage or a GPA
"""
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Sequence

from examflex.core.constants import GradeRules
from examflex.utils import round2, to_float


class GradeInfo(NamedTuple):
    grade: str
    grade_point: float


FAIL = GradeInfo(GradeRules.FAIL_GRADE, GradeRules.FAIL_GRADE_POINT)


@dataclass(frozen=True)
class GradeBand:
    """One row of a grade table, e.g. 80-89.99 -> A (4.00)"""
    from_mark: float
    to_mark: float
    grade: str
    grade_point: float

    def contains(self, value: float) -> bool:
        return self.from_mark <= value <= self.to_mark

    @classmethod
    def from_dict(cls, data) -> "GradeBand":
        """Build from a schema object or a plain dict"""
        get = data.get if isinstance(data, dict) else lambda key, default=None: getattr(data, key, default)
        return cls(
            from_mark=to_float(get("from_mark", 0)),
            to_mark=to_float(get("to_mark", 0)),
            grade=str(get("grade", GradeRules.FAIL_GRADE) or GradeRules.FAIL_GRADE),
            grade_point=to_float(get("grade_point", 0)),
        )


def grade_of(value: float, bands: Iterable[GradeBand]) -> GradeInfo:
    """
    First band containing value, in the order given.

    Callers must pass bands sorted by from_mark descending. A value outside
    every band is an F, not an error.
    """
    for band in bands:
        if band.contains(value):
            return GradeInfo(band.grade, band.grade_point)
    return FAIL


class GradeScale:
    """
    Grade table for one request.

    Bands are sorted once, highest from_mark first, so lookups can stop at
    the first match.
    """

    def __init__(self, bands: Sequence[GradeBand]):
        self.bands: List[GradeBand] = sorted(bands, key=lambda b: b.from_mark, reverse=True)
        # Reverse lookup table for GPA -> letter grade
        self._by_point: List[GradeBand] = sorted(
            self.bands, key=lambda b: b.grade_point, reverse=True
        )

    @classmethod
    def from_bands(cls, bands: Iterable) -> "GradeScale":
        return cls([b if isinstance(b, GradeBand) else GradeBand.from_dict(b) for b in bands])

    @property
    def is_empty(self) -> bool:
        return not self.bands

    @property
    def max_grade_point(self) -> float:
        if not self.bands:
            return 0.0
        return max(band.grade_point for band in self.bands)

    def grade_of(self, value: float) -> GradeInfo:
        """Grade for a percentage, rounded to 2 dp so it cannot slip between bands"""
        return grade_of(round2(value), self.bands)

    def letter_for_gpa(self, gpa: float) -> str:
        """Letter of the band with the largest grade point not above gpa"""
        gpa = round2(gpa)
        for band in self._by_point:
            if band.grade_point <= gpa:
                return band.grade
        return GradeRules.FAIL_GRADE

    def clamp_gpa(self, gpa: float) -> float:
        return min(max(0.0, gpa), self.max_grade_point)

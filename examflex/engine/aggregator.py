"""
Student Aggregator
Folds a student's subject results into GPA, totals and pass/fail
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from examflex.core.constants import GradeRules, ResultStatus
from examflex.engine.grade_scale import GradeScale
from examflex.engine.subject_grader import SubjectResult
from examflex.utils import round2


@dataclass(frozen=True)
class StudentResult:
    """Complete result of one student for one exam"""
    student_id: Any
    subjects: Tuple[SubjectResult, ...]
    gpa_without_optional: float
    gpa_with_optional: float
    total_mark_without_optional: float
    total_mark_with_optional: float
    letter_grade: str
    letter_grade_without_optional: str
    result_status: ResultStatus
    failed_subject_count: int
    student_name: str = "N/A"
    roll: Any = None
    optional_subject_id: Optional[str] = None
    fourth_subject_passed: bool = False
    optional_bonus: float = 0.0
    optional_bonus_gp: float = 0.0

    @property
    def passed(self) -> bool:
        return self.result_status == ResultStatus.PASS

    def to_dict(self) -> Dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "roll": self.roll,
            "subjects": [s.to_dict() for s in self.subjects],
            "gpa_without_optional": self.gpa_without_optional,
            "gpa_with_optional": self.gpa_with_optional,
            "gpa": self.gpa_with_optional,
            "total_mark_without_optional": self.total_mark_without_optional,
            "total_mark_with_optional": self.total_mark_with_optional,
            "letter_grade": self.letter_grade,
            "letter_grade_with_optional": self.letter_grade,
            "letter_grade_without_optional": self.letter_grade_without_optional,
            "result_status": self.result_status.value,
            "failed_subject_count": self.failed_subject_count,
            "optional_subject_id": self.optional_subject_id,
            "fourth_subject_passed": self.fourth_subject_passed,
            "optional_bonus": self.optional_bonus,
            "optional_bonus_gp": self.optional_bonus_gp,
        }


def find_optional(
    subjects: Sequence[SubjectResult],
    optional_subject_id: Optional[str],
) -> Optional[SubjectResult]:
    """The student's chosen 4th subject, else the first one configured optional"""
    if optional_subject_id is not None:
        for subject in subjects:
            if subject.matches(optional_subject_id):
                return subject
    for subject in subjects:
        if subject.is_optional:
            return subject
    return None


def optional_bonus(optional: Optional[SubjectResult]) -> Tuple[float, float]:
    """
    (bonus grade point, bonus mark) earned by a passed optional subject.

    Only the grade point above 2.00 and the mark above 40% of the subject's
    maximum count.
    """
    if optional is None or not optional.passed:
        return 0.0, 0.0
    bonus_gp = max(0.0, optional.grade_point - GradeRules.OPTIONAL_GP_BASE)
    bonus_mark = max(0.0, optional.final_mark - GradeRules.OPTIONAL_FREE_MARK_RATIO * optional.max_mark)
    return bonus_gp, bonus_mark


def aggregate_student(
    student_id: Any,
    subjects: Sequence[SubjectResult],
    scale: GradeScale,
    optional_subject_id: Optional[str] = None,
    student_name: str = "N/A",
    roll: Any = None,
) -> StudentResult:
    """Build the StudentResult from already graded subjects"""
    optional = find_optional(subjects, optional_subject_id)
    # A student's own choice overrides the is_optional flags in the config
    chosen = optional is not None and optional.matches(optional_subject_id)

    # Uncountable and optional subjects never enter the GPA or the totals
    required = [
        s for s in subjects
        if not s.is_uncountable and s is not optional and (chosen or not s.is_optional)
    ]
    failed = [s for s in required if not s.passed]
    total_without = sum(s.final_mark for s in required)

    if failed or not required:
        gpa_without = 0.0
    else:
        gpa_without = scale.clamp_gpa(sum(s.grade_point for s in required) / len(required))

    bonus_gp, bonus_mark = optional_bonus(optional)

    if failed:
        gpa_with = 0.0
        letter = letter_without = GradeRules.FAIL_GRADE
    else:
        gpa_with = scale.clamp_gpa(gpa_without + bonus_gp)
        letter = scale.letter_for_gpa(gpa_with)
        letter_without = scale.letter_for_gpa(gpa_without)

    return StudentResult(
        student_id=student_id,
        student_name=student_name,
        roll=roll,
        subjects=tuple(subjects),
        gpa_without_optional=round2(gpa_without),
        gpa_with_optional=round2(gpa_with),
        total_mark_without_optional=round2(total_without),
        total_mark_with_optional=round2(total_without + bonus_mark),
        letter_grade=letter,
        letter_grade_without_optional=letter_without,
        result_status=ResultStatus.FAIL if failed else ResultStatus.PASS,
        failed_subject_count=len(failed),
        optional_subject_id=optional.subject_id if optional is not None else None,
        fourth_subject_passed=optional is not None and optional.passed,
        optional_bonus=round2(bonus_mark),
        optional_bonus_gp=round2(bonus_gp),
    )

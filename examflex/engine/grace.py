"""
Grace-Mark Pass Resolver
Single-subject evaluation used by the mark entry flow: individual pass,
overall pass, fail threshold and a grace top-up that can only turn a fail
into a pass.
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from examflex.core.constants import GradeRules, ResultStatus
from examflex.engine.grade_scale import FAIL, GradeScale
from examflex.engine.converter import convert_part, percentage_of
from examflex.schemas import ExamSubjectConfig, MarkStudent
from examflex.utils import clean_float, format_mark, non_negative, round2, to_float

ABSENT = "absent"


@dataclass(frozen=True)
class GraceOutcome:
    """Mark entry result for one student"""
    student_id: Any
    obtained_mark: float
    final_mark: float
    grace_mark: float
    result_status: ResultStatus
    remark: str
    percentage: float
    grade: str
    grade_point: float
    part_marks: Dict[str, Any] = field(default_factory=dict)
    exam_name: Optional[str] = None
    subject_name: Optional[str] = None
    attendance_status: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.result_status == ResultStatus.PASS

    def to_dict(self) -> Dict:
        result = asdict(self)
        result["result_status"] = self.result_status.value
        return result


def fail_threshold(highest_fail_mark: Optional[float]) -> Optional[float]:
    """Lowest passing total, or None when no highest fail mark is configured"""
    highest = to_float(highest_fail_mark)
    if highest <= 0:
        return None
    return clean_float(highest + GradeRules.THRESHOLD_STEP)


def grace_needed(threshold: float, obtained: float) -> int:
    return int(math.ceil(clean_float(threshold - obtained)))


def resolve_grace(
    obtained: float,
    threshold: Optional[float],
    configured_grace: float,
) -> float:
    """
    Grace that turns this total into a pass, or 0.

    Grace is all-or-nothing: if the capped amount cannot close the gap to
    the threshold, none is granted.
    """
    if threshold is None or configured_grace <= 0 or obtained >= threshold:
        return 0.0
    granted = min(grace_needed(threshold, obtained), configured_grace)
    if obtained + granted >= threshold:
        return float(granted)
    return 0.0


def _is_absent(subject: ExamSubjectConfig, student: MarkStudent) -> bool:
    if not subject.attendance_required:
        return False
    return (student.attendance_status or ABSENT).strip().lower() == ABSENT


def evaluate_student(student: MarkStudent, subject: ExamSubjectConfig, scale: GradeScale) -> GraceOutcome:
    """Run attendance, individual, overall and threshold checks, then grace"""
    parts = subject.exam_config
    part_marks = student.part_marks

    if _is_absent(subject, student):
        return GraceOutcome(
            student_id=student.student_id,
            obtained_mark=0.0,
            final_mark=0.0,
            grace_mark=0.0,
            result_status=ResultStatus.FAIL,
            remark="Absent",
            percentage=0.0,
            grade=FAIL.grade,
            grade_point=FAIL.grade_point,
            part_marks=dict(part_marks),
            exam_name=subject.exam_name,
            subject_name=subject.subject_name,
            attendance_status=ABSENT,
        )

    marks = {p.exam_code_title: non_negative(to_float(part_marks.get(p.exam_code_title))) for p in parts}
    obtained = clean_float(sum(marks.values()))
    total_max = sum(convert_part(p.total_mark, p.conversion) for p in parts)

    # Individual pass
    failed_parts: List[str] = []
    for part in parts:
        if part.pass_mark > 0 and marks[part.exam_code_title] < part.pass_mark:
            failed_parts.append(
                f"{part.exam_code_title} ({format_mark(marks[part.exam_code_title])} < {format_mark(part.pass_mark)})"
            )
    individual_pass = not failed_parts

    # Overall pass
    overall_part = next((p for p in parts if p.is_overall), None)
    overall_required = overall_part.overall_mark if overall_part is not None else 0.0
    overall_calc = clean_float(sum(convert_part(marks[p.exam_code_title], p.conversion) for p in parts))
    overall_pass = overall_required <= 0 or overall_calc >= overall_required

    # Threshold pass
    threshold = fail_threshold(subject.highest_fail_mark)
    threshold_pass = threshold is None or obtained >= threshold

    pass_before_grace = individual_pass and overall_pass and threshold_pass

    remark = ""
    if not pass_before_grace:
        reasons = []
        if not individual_pass:
            reasons.append("Failed Individual: " + ", ".join(failed_parts))
        if not overall_pass:
            reasons.append(f"Overall: {format_mark(overall_calc)} < {format_mark(overall_required)}")
        if not threshold_pass:
            reasons.append(f"Below threshold: {format_mark(obtained)} < {format_mark(threshold)}")
        remark = " | ".join(reasons)

    applied_grace = 0.0
    passed = pass_before_grace
    configured_grace = non_negative(to_float(subject.grace_mark))

    if not pass_before_grace and threshold is not None and configured_grace > 0 and obtained < threshold:
        applied_grace = resolve_grace(obtained, threshold, configured_grace)
        if applied_grace > 0:
            passed = True
            remark = f"Pass by Grace (+{format_mark(applied_grace)} marks)"
        else:
            remark = (
                f"Failed even after grace (needed {grace_needed(threshold, obtained)}, "
                f"available {format_mark(configured_grace)})"
            )

    final_mark = clean_float(obtained + applied_grace)
    percentage = percentage_of(final_mark, total_max)
    grade = scale.grade_of(percentage)

    return GraceOutcome(
        student_id=student.student_id,
        obtained_mark=round2(obtained),
        final_mark=round2(final_mark),
        grace_mark=round2(applied_grace),
        result_status=ResultStatus.PASS if passed else ResultStatus.FAIL,
        remark=remark,
        percentage=round2(percentage),
        grade=grade.grade,
        grade_point=grade.grade_point,
        part_marks=dict(part_marks),
        exam_name=subject.exam_name,
        subject_name=subject.subject_name,
        attendance_status=student.attendance_status,
    )

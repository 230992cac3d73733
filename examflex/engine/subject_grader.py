"""
Subject Grader
Grades single subjects and combined (multi-paper) subjects
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from examflex.core.constants import GradeRules, ResultStatus, SubjectType
from examflex.engine.converter import (
    apply_grace,
    convert,
    converted_max,
    part_breakdown,
    percentage_of,
)
from examflex.engine.grade_scale import FAIL, GradeScale
from examflex.schemas import SubjectConfig, SubjectMarks
from examflex.utils import clean_float, format_mark, non_negative, round2, to_float

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SingleSubjectResult:
    """Graded result of one subject (or of one paper of a combined subject)"""
    subject_id: str
    subject_name: str
    converted_mark: float
    grace_mark: float
    final_mark: float
    max_mark: float
    percentage: float
    grade: str
    grade_point: float
    pass_status: ResultStatus
    is_uncountable: bool = False
    is_optional: bool = False
    failed_parts: Tuple[str, ...] = ()

    kind = "single"

    @property
    def passed(self) -> bool:
        return self.pass_status == ResultStatus.PASS

    def matches(self, subject_id: Optional[str]) -> bool:
        return subject_id is not None and subject_id == self.subject_id

    def paper_ids(self) -> Tuple[str, ...]:
        return (self.subject_id,)

    def to_dict(self) -> Dict:
        result = asdict(self)
        result["kind"] = self.kind
        result["pass_status"] = self.pass_status.value
        result["failed_parts"] = list(self.failed_parts)
        return result


@dataclass(frozen=True)
class CombinedSubjectResult(SingleSubjectResult):
    """Two or more papers graded together as one subject"""
    combined_id: str = ""
    parts: Tuple[SingleSubjectResult, ...] = ()

    kind = "combined"

    def matches(self, subject_id: Optional[str]) -> bool:
        if subject_id is None:
            return False
        return subject_id == self.combined_id or subject_id in self.paper_ids()

    def paper_ids(self) -> Tuple[str, ...]:
        return tuple(p.subject_id for p in self.parts)

    def to_dict(self) -> Dict:
        result = super().to_dict()
        result["parts"] = [p.to_dict() for p in self.parts]
        result["combined_final_mark"] = self.final_mark
        return result


SubjectResult = Union[SingleSubjectResult, CombinedSubjectResult]


@dataclass
class _Paper:
    """Intermediate marks of one paper before grading"""
    config: SubjectConfig
    obtained: Dict[str, float] = field(default_factory=dict)
    converted: float = 0.0
    grace: float = 0.0
    final: float = 0.0
    max_mark: float = 0.0


def _measure(config: SubjectConfig, marks: SubjectMarks) -> _Paper:
    grace = non_negative(to_float(marks.grace_mark))

    if not config.parts:
        # No part breakdown: the caller sent the final mark directly
        converted = non_negative(to_float(marks.final_mark))
        max_mark = GradeRules.DEFAULT_SUBJECT_MAX
        converted = min(converted, max_mark)
        return _Paper(
            config=config,
            converted=converted,
            grace=grace,
            final=min(apply_grace(converted, grace, config.rounding_method), max_mark + grace),
            max_mark=max_mark,
        )

    converted = convert(marks.part_marks, config.parts, config.rounding_method)
    max_mark = converted_max(config.parts)
    # Re-rounding after grace must not lift the mark past the maximum
    final = min(apply_grace(converted, grace, config.rounding_method), clean_float(max_mark + grace))
    return _Paper(
        config=config,
        obtained=part_breakdown(marks.part_marks, config.parts),
        converted=converted,
        grace=grace,
        final=final,
        max_mark=max_mark,
    )


def _failed_parts(paper: _Paper) -> List[str]:
    failed = []
    for part in paper.config.parts:
        if part.pass_mark > 0 and paper.obtained.get(part.exam_code_title, 0.0) < part.pass_mark:
            got = paper.obtained.get(part.exam_code_title, 0.0)
            failed.append(f"{part.exam_code_title} ({format_mark(got)} < {format_mark(part.pass_mark)})")
    return failed


def _below_required_percent(percentage: float, required: float) -> bool:
    return required > 0 and round2(percentage) < required


def _grade_paper(paper: _Paper, scale: GradeScale) -> SingleSubjectResult:
    config = paper.config
    percentage = percentage_of(paper.final, paper.max_mark)
    failed = _failed_parts(paper)

    if failed or _below_required_percent(percentage, config.overall_required_percent):
        grade = FAIL
    else:
        grade = scale.grade_of(percentage)

    return SingleSubjectResult(
        subject_id=config.subject_id,
        subject_name=config.subject_name,
        converted_mark=round2(paper.converted),
        grace_mark=round2(paper.grace),
        final_mark=round2(paper.final),
        max_mark=round2(paper.max_mark),
        percentage=round2(percentage),
        grade=grade.grade,
        grade_point=grade.grade_point,
        pass_status=ResultStatus.FAIL if grade.grade == GradeRules.FAIL_GRADE else ResultStatus.PASS,
        is_uncountable=config.subject_type == SubjectType.UNCOUNTABLE,
        is_optional=config.is_optional,
        failed_parts=tuple(failed),
    )


def grade_single(config: SubjectConfig, marks: SubjectMarks, scale: GradeScale) -> SingleSubjectResult:
    """Convert, add grace, grade against the subject's own maximum"""
    return _grade_paper(_measure(config, marks), scale)


def _aggregate_part_failures(papers: Sequence[_Paper]) -> List[str]:
    """
    Per part code across all papers: summed obtained vs summed pass marks.

    CQ of paper 1 + CQ of paper 2 must reach the two CQ pass marks added
    together, even when the combined percentage is a pass.
    """
    obtained: Dict[str, float] = OrderedDict()
    required: Dict[str, float] = OrderedDict()
    for paper in papers:
        for part in paper.config.parts:
            code = part.exam_code_title
            obtained[code] = obtained.get(code, 0.0) + paper.obtained.get(code, 0.0)
            required[code] = required.get(code, 0.0) + max(0.0, part.pass_mark)

    failed = []
    for code, need in required.items():
        got = clean_float(obtained[code])
        if need > 0 and got < clean_float(need):
            failed.append(f"{code} ({format_mark(got)} < {format_mark(need)})")
    return failed


def grade_combined(
    combined_id: str,
    papers: Sequence[Tuple[SubjectConfig, SubjectMarks]],
    scale: GradeScale,
) -> CombinedSubjectResult:
    """
    Grade papers sharing a combined_id as one subject.

    The grade comes from the combined percentage, never from averaging the
    papers' grades. A per-code aggregate below its pass mark, or a combined
    percentage under overall_required_percent, forces an F.
    """
    measured = [_measure(config, marks) for config, marks in papers]
    graded_papers = tuple(_grade_paper(paper, scale) for paper in measured)

    converted = sum(p.converted for p in measured)
    grace = sum(p.grace for p in measured)
    final = sum(p.final for p in measured)
    max_mark = sum(p.max_mark for p in measured)
    percentage = percentage_of(final, max_mark)

    failed = _aggregate_part_failures(measured)
    required_percent = max(p.config.overall_required_percent for p in measured)

    if failed or _below_required_percent(percentage, required_percent):
        grade = FAIL
    else:
        grade = scale.grade_of(percentage)

    configs = [p.config for p in measured]
    logger.debug(f"Combined {combined_id}: {round2(final)}/{round2(max_mark)} -> {grade.grade}")

    return CombinedSubjectResult(
        subject_id=combined_id,
        subject_name=" + ".join(c.subject_name for c in configs),
        converted_mark=round2(converted),
        grace_mark=round2(grace),
        final_mark=round2(final),
        max_mark=round2(max_mark),
        percentage=round2(percentage),
        grade=grade.grade,
        grade_point=grade.grade_point,
        pass_status=ResultStatus.FAIL if grade.grade == GradeRules.FAIL_GRADE else ResultStatus.PASS,
        is_uncountable=all(c.subject_type == SubjectType.UNCOUNTABLE for c in configs),
        is_optional=any(c.is_optional for c in configs),
        failed_parts=tuple(failed),
        combined_id=combined_id,
        parts=graded_papers,
    )


def grade_subjects(
    configs: Mapping[str, SubjectConfig],
    marks: Mapping[str, SubjectMarks],
    scale: GradeScale,
) -> List[SubjectResult]:
    """
    Grade every subject a student has marks for.

    Papers with the same combined_id are graded together; results keep the
    order in which each subject (or group) first appears in marks.
    """
    groups: "OrderedDict[str, List[Tuple[SubjectConfig, SubjectMarks]]]" = OrderedDict()
    for subject_id, subject_marks in marks.items():
        config = configs.get(subject_id) or SubjectConfig(subject_id=subject_id)
        key = config.combined_id or subject_id
        groups.setdefault(key, []).append((config, subject_marks))

    results: List[SubjectResult] = []
    for key, papers in groups.items():
        if len(papers) > 1:
            results.append(grade_combined(key, papers, scale))
        else:
            config, subject_marks = papers[0]
            results.append(grade_single(config, subject_marks, scale))
    return results

"""
Engine Module
Pure grading and merit ranking functions; no I/O, no shared state

Usage:
    from examflex.engine import GradeScale, grade_subjects, aggregate_student, rank_cohort, MeritType

    scale = GradeScale.from_bands(payload.grade_rules)

    # Grade a student's subjects, then fold them into a result
    subjects = grade_subjects(configs, student.marks, scale)
    result = aggregate_student(student.student_id, subjects, scale, student.optional_subject_id)

    # Rank the whole class once
    records = rank_cohort(entries, MeritType.parse("grade_point_non_sequential"))
"""

from .grade_scale import (
    GradeBand,
    GradeInfo,
    GradeScale,
    grade_of,
)

from .converter import (
    round_mark,
    convert,
    converted_max,
    apply_grace,
    percentage_of,
)

from .subject_grader import (
    SingleSubjectResult,
    CombinedSubjectResult,
    SubjectResult,
    grade_single,
    grade_combined,
    grade_subjects,
)

from .aggregator import (
    StudentResult,
    aggregate_student,
    find_optional,
    optional_bonus,
)

from .grace import (
    GraceOutcome,
    evaluate_student,
    fail_threshold,
    resolve_grace,
)

from .merit import (
    MeritType,
    MeritInput,
    MeritRecord,
    sort_cohort,
    assign_ranks,
    rank_cohort,
    competition_ranks,
    group_view,
    composite_view,
    rank_within_groups,
)

__all__ = [
    # Grade scale
    "GradeBand",
    "GradeInfo",
    "GradeScale",
    "grade_of",
    # Conversion
    "round_mark",
    "convert",
    "converted_max",
    "apply_grace",
    "percentage_of",
    # Subjects
    "SingleSubjectResult",
    "CombinedSubjectResult",
    "SubjectResult",
    "grade_single",
    "grade_combined",
    "grade_subjects",
    # Students
    "StudentResult",
    "aggregate_student",
    "find_optional",
    "optional_bonus",
    # Grace flow
    "GraceOutcome",
    "evaluate_student",
    "fail_threshold",
    "resolve_grace",
    # Merit
    "MeritType",
    "MeritInput",
    "MeritRecord",
    "sort_cohort",
    "assign_ranks",
    "rank_cohort",
    "competition_ranks",
    "group_view",
    "composite_view",
    "rank_within_groups",
]

"""
Pydantic schemas for API request/response models

Every optional payload field gets its default here, once; an explicit null
is treated like a missing key. The engine never null-coalesces raw JSON itself.
"""
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator
from typing import List, Dict, Optional, Any, Union

from examflex.core.constants import RoundingMethod, SubjectType


StudentId = Union[int, str]


def _coerce_id(value):
    if value is None:
        return value
    return str(value)


def _default_if_none(cls, value, info: ValidationInfo):
    """An explicit null takes the field's default, same as a missing key"""
    if value is None:
        return cls.model_fields[info.field_name].get_default(call_default_factory=True)
    return value


def _index_by_student(value):
    """Accept either {student_id: {...}} or [{student_id: ..., ...}]"""
    if isinstance(value, list):
        return {str(item.get("student_id")): item for item in value if isinstance(item, dict)}
    return value


# ===== Shared Schemas =====
class GradeBandSchema(BaseModel):
    from_mark: float = 0.0
    to_mark: float = 0.0
    grade: str = "F"
    grade_point: float = 0.0

    null_defaults = field_validator("from_mark", "to_mark", "grade", "grade_point", mode="before")(_default_if_none)


# ===== Mark Entry (grace flow) Schemas =====
class ExamPartConfig(BaseModel):
    exam_code_title: str = Field(..., description="Part code: CQ, MCQ, SBA, Practical")
    total_mark: float = 100.0
    pass_mark: float = 0.0
    conversion: float = 100.0
    is_individual: bool = Field(False, description="Accepted for compatibility; any part with pass_mark > 0 is checked")
    is_overall: bool = False
    overall_mark: float = 0.0

    null_defaults = field_validator(
        "total_mark", "pass_mark", "conversion", "is_individual", "is_overall", "overall_mark", mode="before"
    )(_default_if_none)


class ExamSubjectConfig(BaseModel):
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    exam_name: str = "Semester Exam"
    grace_mark: float = 0.0
    highest_fail_mark: Optional[float] = None
    method_of_evaluation: str = Field("At Actual", description="Accepted for compatibility; the grace flow always works on actual marks")
    attendance_required: bool = False
    exam_config: List[ExamPartConfig] = []

    normalize_ids = field_validator("subject_id", mode="before")(_coerce_id)
    null_defaults = field_validator(
        "exam_name", "grace_mark", "method_of_evaluation", "attendance_required", "exam_config", mode="before"
    )(_default_if_none)


class MarkStudent(BaseModel):
    student_id: StudentId
    part_marks: Dict[str, Optional[float]] = {}
    attendance_status: Optional[str] = None

    null_defaults = field_validator("part_marks", mode="before")(_default_if_none)


class MarkEntryConfigRequest(BaseModel):
    institute_id: str = Field(..., description="Institute identifier")
    exam_type: str = "semester"
    subjects: List[ExamSubjectConfig] = Field(..., min_length=1)
    grade_points: List[GradeBandSchema] = []

    normalize_ids = field_validator("institute_id", mode="before")(_coerce_id)
    null_defaults = field_validator("exam_type", "grade_points", mode="before")(_default_if_none)


class MarkCalculateRequest(MarkEntryConfigRequest):
    students: List[MarkStudent] = []

    null_students = field_validator("students", mode="before")(_default_if_none)


class MarkProcessRequest(BaseModel):
    temp_id: str = Field(..., description="Token returned by /config")
    students: List[MarkStudent] = []

    null_defaults = field_validator("students", mode="before")(_default_if_none)


# ===== Result Schemas =====
class PartConfig(BaseModel):
    exam_code_title: str = Field(..., description="Part code: CQ, MCQ, SBA, Practical")
    total_mark: float = 100.0
    pass_mark: float = 0.0
    conversion: float = 100.0
    rounding_method: Optional[RoundingMethod] = None

    null_defaults = field_validator("total_mark", "pass_mark", "conversion", mode="before")(_default_if_none)

    @field_validator("rounding_method", mode="before")
    @classmethod
    def _parse_rounding(cls, value):
        if value is None or value == "":
            return None
        return RoundingMethod.parse(value)


class SubjectConfig(BaseModel):
    subject_id: str
    subject_name: str = "Unknown"
    parts: List[PartConfig] = []
    rounding_method: RoundingMethod = RoundingMethod.AT_ACTUAL
    is_combined: bool = False
    combined_id: Optional[str] = None
    overall_required_percent: float = 0.0
    subject_type: SubjectType = SubjectType.COUNTABLE
    is_optional: bool = False

    normalize_ids = field_validator("subject_id", "combined_id", mode="before")(_coerce_id)
    null_defaults = field_validator(
        "subject_name", "parts", "is_combined", "overall_required_percent", "is_optional", mode="before"
    )(_default_if_none)

    @field_validator("rounding_method", mode="before")
    @classmethod
    def _parse_rounding(cls, value):
        return RoundingMethod.parse(value)

    @field_validator("subject_type", mode="before")
    @classmethod
    def _parse_subject_type(cls, value):
        if str(value or "").strip().lower() == "uncountable":
            return SubjectType.UNCOUNTABLE
        return SubjectType.COUNTABLE


class SubjectMarks(BaseModel):
    part_marks: Dict[str, Optional[float]] = {}
    grace_mark: float = 0.0
    final_mark: Optional[float] = None

    null_defaults = field_validator("part_marks", "grace_mark", mode="before")(_default_if_none)


class ResultStudent(BaseModel):
    student_id: StudentId
    student_name: str = "N/A"
    roll: Optional[StudentId] = None
    marks: Dict[str, SubjectMarks] = {}
    optional_subject_id: Optional[str] = None

    normalize_ids = field_validator("optional_subject_id", mode="before")(_coerce_id)
    null_defaults = field_validator("student_name", "marks", mode="before")(_default_if_none)


class ResultProcessRequest(BaseModel):
    institute_id: Optional[str] = None
    exam_name: str = ""
    has_combined: bool = False
    mark_configs: List[SubjectConfig] = []
    grade_rules: List[GradeBandSchema] = []
    students: List[ResultStudent] = []

    normalize_ids = field_validator("institute_id", mode="before")(_coerce_id)
    null_defaults = field_validator(
        "exam_name", "has_combined", "mark_configs", "grade_rules", "students", mode="before"
    )(_default_if_none)

    @field_validator("mark_configs", mode="before")
    @classmethod
    def _configs_as_list(cls, value):
        """Allow {subject_id: config} as well as a list"""
        if isinstance(value, dict):
            return [
                {"subject_id": key, **config} if "subject_id" not in config else config
                for key, config in value.items()
            ]
        return value


# ===== Merit Schemas =====
class MeritExamConfig(BaseModel):
    merit_process_type: str = "total_mark_sequential"
    group_by_shift: bool = False
    group_by_section: bool = False
    group_by_group: bool = False
    group_by_gender: bool = False
    group_by_religion: bool = False
    rank_within_groups: bool = False

    null_defaults = field_validator(
        "merit_process_type", "group_by_shift", "group_by_section", "group_by_group",
        "group_by_gender", "group_by_religion", "rank_within_groups", mode="before"
    )(_default_if_none)

    def group_by_fields(self) -> List[str]:
        """Selected grouping attributes; [] means the whole class together"""
        fields = []
        if self.group_by_shift:
            fields.append("shift")
        if self.group_by_section:
            fields.append("section")
        if self.group_by_group:
            fields.append("group")
        if self.group_by_gender:
            fields.append("gender")
        if self.group_by_religion:
            fields.append("religion")
        return fields


class AcademicDetail(BaseModel):
    class_roll: Optional[StudentId] = None
    shift: Optional[StudentId] = None
    section: Optional[StudentId] = None
    group: Optional[StudentId] = None


class StudentDetail(BaseModel):
    student_gender: Optional[StudentId] = None
    student_religion: Optional[StudentId] = None


class MeritResultEntry(BaseModel):
    """A student result as produced by /api/results/process"""
    student_id: StudentId
    student_name: str = "N/A"
    roll: Optional[StudentId] = None
    result_status: str = "Fail"
    gpa: Optional[float] = None
    gpa_with_optional: Optional[float] = None
    gpa_without_optional: float = 0.0
    total_mark_with_optional: Optional[float] = None
    letter_grade: Optional[str] = None
    letter_grade_with_optional: Optional[str] = None
    optional_bonus: float = 0.0
    subjects: List[Dict[str, Any]] = []

    null_defaults = field_validator(
        "student_name", "result_status", "gpa_without_optional", "optional_bonus", "subjects", mode="before"
    )(_default_if_none)


class MeritProcessRequest(BaseModel):
    institute_id: Optional[str] = None
    exam_name: str = ""
    results: List[MeritResultEntry] = []
    exam_config: MeritExamConfig = MeritExamConfig()
    academic_details: Dict[str, AcademicDetail] = {}
    student_details: Dict[str, StudentDetail] = {}

    normalize_ids = field_validator("institute_id", mode="before")(_coerce_id)
    null_defaults = field_validator(
        "exam_name", "results", "exam_config", "academic_details", "student_details", mode="before"
    )(_default_if_none)

    @field_validator("academic_details", "student_details", mode="before")
    @classmethod
    def _details_by_student(cls, value):
        return _index_by_student(value)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_results(cls, data):
        """Accept the whole compute_result output as `results`"""
        if isinstance(data, dict):
            results = data.get("results")
            if isinstance(results, dict):
                data = {**data, "results": results.get("results") or []}
        return data


# ===== Response Schemas =====
class ConfigSavedResponse(BaseModel):
    status: str
    temp_id: str
    expires_at: str


class ProcessResponse(BaseModel):
    status: str = "success"
    message: str
    results: Dict[str, Any]

"""Pytest configuration and shared fixtures."""
import copy
import os

# Keep test runs from writing dated log files
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from examflex.engine import GradeScale
from examflex.schemas import PartConfig, SubjectConfig


SCALE_BANDS = [
    {"from_mark": 90, "to_mark": 100, "grade": "A+", "grade_point": 5.0},
    {"from_mark": 80, "to_mark": 89.99, "grade": "A", "grade_point": 4.0},
    {"from_mark": 33, "to_mark": 79.99, "grade": "B", "grade_point": 3.0},
    {"from_mark": 0, "to_mark": 32.99, "grade": "F", "grade_point": 0.0},
]


@pytest.fixture
def scale() -> GradeScale:
    return GradeScale.from_bands(SCALE_BANDS)


def cq_mcq_subject(subject_id, name="Subject", **overrides) -> SubjectConfig:
    """CQ 70 (pass 23) + MCQ 30 (pass 10), both at 100% conversion"""
    data = {
        "subject_id": subject_id,
        "subject_name": name,
        "parts": [
            PartConfig(exam_code_title="CQ", total_mark=70, pass_mark=23, conversion=100),
            PartConfig(exam_code_title="MCQ", total_mark=30, pass_mark=10, conversion=100),
        ],
    }
    data.update(overrides)
    return SubjectConfig(**data)


@pytest.fixture
def result_payload():
    """Two students, a combined Bangla, Math, optional Agriculture, uncountable PE"""
    cq_mcq = [
        {"exam_code_title": "CQ", "total_mark": 70, "pass_mark": 23, "conversion": 100},
        {"exam_code_title": "MCQ", "total_mark": 30, "pass_mark": 10, "conversion": 100},
    ]
    return {
        "institute_id": 55,
        "exam_name": "Annual Exam",
        "has_combined": True,
        "grade_rules": copy.deepcopy(SCALE_BANDS),
        "mark_configs": [
            {"subject_id": 101, "subject_name": "Bangla 1st", "parts": cq_mcq, "is_combined": True, "combined_id": "BAN"},
            {"subject_id": 102, "subject_name": "Bangla 2nd", "parts": cq_mcq, "is_combined": True, "combined_id": "BAN"},
            {"subject_id": 103, "subject_name": "Math", "parts": cq_mcq},
            {"subject_id": 104, "subject_name": "Agriculture", "parts": cq_mcq, "is_optional": True},
            {
                "subject_id": 105,
                "subject_name": "Physical Education",
                "subject_type": "Uncountable",
                "parts": [{"exam_code_title": "Practical", "total_mark": 100, "pass_mark": 33}],
            },
        ],
        "students": [
            {
                "student_id": 1,
                "student_name": "Anika",
                "roll": 1,
                "optional_subject_id": 104,
                "marks": {
                    "101": {"part_marks": {"CQ": 60, "MCQ": 28}},
                    "102": {"part_marks": {"CQ": 62, "MCQ": 28}},
                    "103": {"part_marks": {"CQ": 65, "MCQ": 28}},
                    "104": {"part_marks": {"CQ": 55, "MCQ": 25}},
                    "105": {"part_marks": {"Practical": 70}},
                },
            },
            {
                "student_id": 2,
                "student_name": "Rafi",
                "roll": 2,
                "optional_subject_id": 104,
                "marks": {
                    "101": {"part_marks": {"CQ": 30, "MCQ": 15}},
                    "102": {"part_marks": {"CQ": 30, "MCQ": 15}},
                    "103": {"part_marks": {"CQ": 20, "MCQ": 20}},
                    "104": {"part_marks": {"CQ": 30, "MCQ": 12}},
                    "105": {"part_marks": {"Practical": 50}},
                },
            },
        ],
    }


@pytest.fixture
def mark_payload():
    """One subject, threshold 32, grace 5, attendance required"""
    return {
        "institute_id": 55,
        "subjects": [
            {
                "subject_id": 7,
                "subject_name": "Physics",
                "exam_name": "Half Yearly",
                "grace_mark": 5,
                "highest_fail_mark": 32,
                "attendance_required": True,
                "exam_config": [
                    {"exam_code_title": "CQ", "total_mark": 70, "pass_mark": 0, "conversion": 100},
                    {"exam_code_title": "MCQ", "total_mark": 30, "pass_mark": 0, "conversion": 100},
                ],
            }
        ],
        "grade_points": copy.deepcopy(SCALE_BANDS),
        "students": [
            {"student_id": 1, "part_marks": {"CQ": 20, "MCQ": 10}, "attendance_status": "present"},
            {"student_id": 2, "part_marks": {"CQ": 50, "MCQ": 25}, "attendance_status": "present"},
            {"student_id": 3, "part_marks": {}, "attendance_status": "absent"},
        ],
    }

"""
Unit tests for the mark entry grace flow
"""
import pytest

from examflex.core.constants import ResultStatus
from examflex.engine import evaluate_student, fail_threshold, resolve_grace
from examflex.schemas import ExamPartConfig, ExamSubjectConfig, MarkStudent


def physics(pass_marks=(0, 0), highest_fail_mark=32, grace_mark=5, **overrides):
    data = {
        "subject_id": 7,
        "subject_name": "Physics",
        "exam_name": "Half Yearly",
        "grace_mark": grace_mark,
        "highest_fail_mark": highest_fail_mark,
        "exam_config": [
            ExamPartConfig(exam_code_title="CQ", total_mark=70, pass_mark=pass_marks[0]),
            ExamPartConfig(exam_code_title="MCQ", total_mark=30, pass_mark=pass_marks[1]),
        ],
    }
    data.update(overrides)
    return ExamSubjectConfig(**data)


def student(cq, mcq, attendance="present"):
    return MarkStudent(student_id=1, part_marks={"CQ": cq, "MCQ": mcq}, attendance_status=attendance)


class TestFailThreshold:

    def test_threshold_above_highest_fail(self):
        assert fail_threshold(32) == 32.01

    @pytest.mark.parametrize("value", [None, 0, -1, ""])
    def test_unset(self, value):
        assert fail_threshold(value) is None


class TestResolveGrace:
    """Test cases for the all-or-nothing grace top-up"""

    def test_exact_gap(self):
        assert resolve_grace(30, 32.01, 5) == 3.0

    def test_gap_too_large(self):
        assert resolve_grace(30, 32.01, 2) == 0.0

    def test_already_passing(self):
        assert resolve_grace(40, 32.01, 5) == 0.0

    def test_no_threshold(self):
        assert resolve_grace(10, None, 5) == 0.0

    def test_fractional_obtained(self):
        assert resolve_grace(30.5, 32.01, 5) == 2.0


class TestEvaluateStudent:
    """Test cases for evaluate_student"""

    def test_pass_by_grace(self, scale):
        """30 against a highest fail mark of 32: 3 grace marks make 33"""
        outcome = evaluate_student(student(20, 10), physics(), scale)
        assert outcome.obtained_mark == 30.0
        assert outcome.grace_mark == 3.0
        assert outcome.final_mark == 33.0
        assert outcome.result_status == ResultStatus.PASS
        assert outcome.remark == "Pass by Grace (+3 marks)"
        assert outcome.grade == "B"

    def test_grace_not_enough(self, scale):
        outcome = evaluate_student(student(20, 10), physics(grace_mark=2), scale)
        assert outcome.grace_mark == 0.0
        assert outcome.final_mark == 30.0
        assert outcome.result_status == ResultStatus.FAIL
        assert outcome.remark == "Failed even after grace (needed 3, available 2)"

    def test_plain_pass(self, scale):
        outcome = evaluate_student(student(50, 25), physics(), scale)
        assert outcome.result_status == ResultStatus.PASS
        assert outcome.grace_mark == 0.0
        assert outcome.remark == ""
        assert outcome.percentage == 75.0

    def test_no_threshold_configured(self, scale):
        outcome = evaluate_student(student(5, 5), physics(highest_fail_mark=None), scale)
        assert outcome.result_status == ResultStatus.PASS
        assert outcome.grace_mark == 0.0

    def test_individual_fail(self, scale):
        outcome = evaluate_student(student(20, 25), physics(pass_marks=(23, 10)), scale)
        assert outcome.result_status == ResultStatus.FAIL
        assert outcome.grace_mark == 0.0
        assert outcome.remark == "Failed Individual: CQ (20 < 23)"

    def test_overall_fail(self, scale):
        config = physics(highest_fail_mark=None)
        config.exam_config[0].is_overall = True
        config.exam_config[0].overall_mark = 40
        outcome = evaluate_student(student(20, 15), config, scale)
        assert outcome.result_status == ResultStatus.FAIL
        assert outcome.remark == "Overall: 35 < 40"

    def test_reasons_joined(self, scale):
        outcome = evaluate_student(student(10, 5), physics(pass_marks=(23, 0), grace_mark=0), scale)
        assert outcome.remark == "Failed Individual: CQ (10 < 23) | Below threshold: 15 < 32.01"

    def test_absent(self, scale):
        config = physics(attendance_required=True)
        outcome = evaluate_student(student(60, 25, attendance="Absent"), config, scale)
        assert outcome.result_status == ResultStatus.FAIL
        assert outcome.remark == "Absent"
        assert outcome.final_mark == 0.0
        assert outcome.attendance_status == "absent"

    def test_missing_attendance_counts_absent(self, scale):
        config = physics(attendance_required=True)
        outcome = evaluate_student(student(60, 25, attendance=None), config, scale)
        assert outcome.remark == "Absent"

    def test_attendance_ignored_when_not_required(self, scale):
        outcome = evaluate_student(student(60, 25, attendance="absent"), physics(), scale)
        assert outcome.result_status == ResultStatus.PASS

    def test_evaluation_method_does_not_change_marks(self, scale):
        """method_of_evaluation is accepted but the flow always uses actual marks"""
        actual = evaluate_student(student(20, 10), physics(), scale)
        converted = evaluate_student(student(20, 10), physics(method_of_evaluation="Converted"), scale)
        assert converted == actual

    def test_to_dict(self, scale):
        data = evaluate_student(student(20, 10), physics(), scale).to_dict()
        assert data["result_status"] == "Pass"
        assert data["subject_name"] == "Physics"
        assert data["part_marks"] == {"CQ": 20.0, "MCQ": 10.0}

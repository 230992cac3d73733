"""
Result Service
Computes subject grades, GPA and pass/fail for a whole exam
"""
import logging
from typing import Any, Dict

from examflex.core import Messages, result_logger
from examflex.engine import GradeScale, aggregate_student, grade_subjects
from examflex.schemas import ResultProcessRequest

logger = logging.getLogger(__name__)


class ResultService:
    """Service for exam result processing"""

    def compute_result(self, payload: ResultProcessRequest) -> Dict[str, Any]:
        """
        Grade every student of the payload.

        A missing grade table is reported in the result, not raised.
        """
        scale = GradeScale.from_bands(payload.grade_rules)
        if scale.is_empty:
            result_logger.warning(f"Result process for '{payload.exam_name}' rejected: grade rules missing")
            return {
                "has_combined": payload.has_combined,
                "exam_name": payload.exam_name,
                "results": [],
                "highest_marks": {},
                "total_students": 0,
                "error": Messages.GRADE_RULES_MISSING,
            }

        configs = {config.subject_id: config for config in payload.mark_configs}

        results = []
        highest: Dict[str, float] = {}

        for student in payload.students:
            subjects = grade_subjects(configs, student.marks, scale)
            result = aggregate_student(
                student.student_id,
                subjects,
                scale,
                optional_subject_id=student.optional_subject_id,
                student_name=student.student_name,
                roll=student.roll,
            )
            results.append(result.to_dict())

            for subject in subjects:
                self._track_highest(highest, subject.subject_id, subject.final_mark)
                if subject.kind == "combined":
                    for paper in subject.parts:
                        self._track_highest(highest, paper.subject_id, paper.final_mark)

        passed = sum(1 for r in results if r["result_status"] == "Pass")
        result_logger.info(
            f"Results computed for '{payload.exam_name}': {len(results)} students, {passed} passed"
        )

        return {
            "has_combined": payload.has_combined,
            "exam_name": payload.exam_name,
            "results": results,
            "highest_marks": highest,
            "total_students": len(results),
        }

    @staticmethod
    def _track_highest(highest: Dict[str, float], subject_id: str, mark: float) -> None:
        highest[subject_id] = max(highest.get(subject_id, 0.0), mark)


# Singleton instance
result_service = ResultService()

"""
Mark Service
Computes mark entry results (grace flow) for one subject
"""
import logging
from typing import Any, Dict, List

from examflex.core import Messages, BadRequestException, mark_entry_logger
from examflex.engine import GradeScale, evaluate_student
from examflex.schemas import MarkCalculateRequest, MarkStudent

logger = logging.getLogger(__name__)

EXAM_TYPE = "semester"


class MarkService:
    """Service for the mark entry calculation"""

    def compute_exam_marks(self, payload: MarkCalculateRequest) -> Dict[str, Any]:
        """
        Evaluate every student against the first subject of the payload.

        A mark entry session always covers one subject.
        """
        if not payload.subjects:
            raise BadRequestException(Messages.NO_SUBJECTS)

        subject = payload.subjects[0]
        scale = GradeScale.from_bands(payload.grade_points)

        results = [evaluate_student(student, subject, scale).to_dict() for student in payload.students]

        passed = sum(1 for r in results if r["result_status"] == "Pass")
        graced = sum(1 for r in results if r["grace_mark"] > 0)
        mark_entry_logger.info(
            f"Marks calculated for institute {payload.institute_id}: "
            f"{len(results)} students, {passed} passed, {graced} by grace"
        )

        return {
            "results": results,
            "institute_id": payload.institute_id,
            "exam_type": EXAM_TYPE,
            "exam_name": subject.exam_name,
            "subject_name": subject.subject_name,
        }

    def compute_from_config(self, config: Dict[str, Any], students: List[MarkStudent]) -> Dict[str, Any]:
        """Merge a stored config with the students sent later"""
        payload = MarkCalculateRequest.model_validate({**config, "students": list(students)})
        return self.compute_exam_marks(payload)


# Singleton instance
mark_service = MarkService()

"""
Merit Service
Builds the class merit list and its grouped views
"""
import logging
from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Font

from examflex.config import settings
from examflex.core import GROUPING_FIELDS, Messages, ResultStatus, merit_logger
from examflex.engine import MeritInput, MeritRecord, MeritType, composite_view, group_view, rank_cohort, rank_within_groups
from examflex.schemas import AcademicDetail, MeritProcessRequest, MeritResultEntry, StudentDetail
from examflex.utils import ensure_directory, generate_timestamp_id, round2, safe_filename, to_float

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "Merit", "Student ID", "Name", "Roll", "Total Mark", "GPA",
    "Letter Grade", "Result", "Shift", "Section", "Group", "Gender", "Religion",
]


class MeritService:
    """Service for merit list processing"""

    def __init__(self):
        self.exports_dir = settings.EXPORTS_DIR
        ensure_directory(self.exports_dir)

    @staticmethod
    def total_mark(entry: MeritResultEntry) -> float:
        """Total with the optional bonus; summed from subjects if not reported"""
        if entry.total_mark_with_optional is not None:
            return to_float(entry.total_mark_with_optional)
        subjects_total = sum(
            to_float(s.get("combined_final_mark", s.get("final_mark"))) for s in entry.subjects
        )
        return subjects_total + to_float(entry.optional_bonus)

    def to_merit_input(
        self,
        entry: MeritResultEntry,
        academic: AcademicDetail,
        student: StudentDetail,
    ) -> MeritInput:
        gpa = entry.gpa_with_optional if entry.gpa_with_optional is not None else entry.gpa
        status = ResultStatus.PASS if str(entry.result_status).strip().lower() == "pass" else ResultStatus.FAIL
        roll = academic.class_roll if academic.class_roll is not None else entry.roll

        return MeritInput(
            student_id=entry.student_id,
            student_name=entry.student_name,
            total_mark=round2(self.total_mark(entry)),
            gpa=round2(to_float(gpa)),
            gpa_without_optional=round2(entry.gpa_without_optional),
            letter_grade=entry.letter_grade_with_optional or entry.letter_grade or "F",
            result_status=status,
            roll=roll,
            shift=academic.shift,
            section=academic.section,
            group=academic.group,
            gender=student.student_gender,
            religion=student.student_religion,
        )

    def compute_merit(self, payload: MeritProcessRequest) -> Dict[str, Any]:
        """
        Rank the whole class once, then partition the ranked list.

        Grouped views keep the class-wide merit_position. With
        rank_within_groups the composite view also carries an independent
        group_merit_position.
        """
        merit_type = MeritType.parse(payload.exam_config.merit_process_type)
        group_by = payload.exam_config.group_by_fields()

        if not payload.results:
            merit_logger.warning(f"Merit process for '{payload.exam_name}': no results found")
            return {
                "total_students": 0,
                "merit_type": payload.exam_config.merit_process_type,
                "grouped_by": group_by,
                "data": {"all_students": []},
                "error": Messages.NO_RESULTS_FOUND,
            }

        entries = [
            self.to_merit_input(
                entry,
                payload.academic_details.get(str(entry.student_id)) or AcademicDetail(),
                payload.student_details.get(str(entry.student_id)) or StudentDetail(),
            )
            for entry in payload.results
        ]

        ranked = rank_cohort(entries, merit_type)

        data: Dict[str, Any] = {"all_students": self._dump(ranked)}
        for field in GROUPING_FIELDS:
            data[f"{field}_wise"] = {key: self._dump(records) for key, records in group_view(ranked, field).items()}

        if group_by:
            if payload.exam_config.rank_within_groups:
                grouped = rank_within_groups(ranked, group_by, merit_type)
            else:
                grouped = composite_view(ranked, group_by)
            data["grouped"] = {key: self._dump(records) for key, records in grouped.items()}

        merit_logger.info(
            f"Merit computed for '{payload.exam_name}': {len(ranked)} students, "
            f"type={merit_type.label}, grouped_by={group_by or 'class'}"
        )

        return {
            "total_students": len(ranked),
            "merit_type": payload.exam_config.merit_process_type,
            "grouped_by": group_by,
            "data": data,
        }

    def export_to_excel(self, exam_name: str, merit: Dict[str, Any]) -> str:
        """Write the class merit list (and one sheet per group) to an .xlsx file"""
        wb = Workbook()

        ws = wb.active
        ws.title = "Merit List"
        self._write_sheet(ws, merit["data"].get("all_students", []))

        for key, rows in merit["data"].get("grouped", {}).items():
            # Sheet titles are capped at 31 characters
            sheet = wb.create_sheet(safe_filename(key)[:31] or "group")
            self._write_sheet(sheet, rows)

        filename = f"{generate_timestamp_id(safe_filename(exam_name or 'merit'))}.xlsx"
        file_path = Path(self.exports_dir) / filename
        wb.save(file_path)

        logger.info(f"Exported merit list to Excel: {filename}")
        return str(file_path)

    @staticmethod
    def _write_sheet(ws, rows: List[Dict[str, Any]]) -> None:
        ws.append(EXPORT_HEADERS)
        for col in range(1, len(EXPORT_HEADERS) + 1):
            ws.cell(row=1, column=col).font = Font(bold=True)

        for r in rows:
            ws.append([
                r["merit_position"], r["student_id"], r["student_name"], r["roll"],
                r["total_mark"], r["gpa"], r["letter_grade"], r["result_status"],
                r["shift"], r["section"], r["group"], r["gender"], r["religion"],
            ])

        # Auto-adjust column width
        for col in ws.columns:
            max_len = max(len(str(cell.value)) if cell.value is not None else 0 for cell in col)
            ws.column_dimensions[col[0].column_letter].width = max_len + 2

    @staticmethod
    def _dump(records: List[MeritRecord]) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in records]


# Singleton instance
merit_service = MeritService()

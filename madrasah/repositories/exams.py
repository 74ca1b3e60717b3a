"""
Exams and results. A result is unique per (exam_id, student_id); saving it
again updates the earlier row.
"""

from typing import List

from madrasah.core.cache import EXAM_RESULTS, EXAMS, REPORT_CARD
from madrasah.repositories.base import TableRepository, collapse_duplicates

CONFLICT_KEY = ("exam_id", "student_id")
RESULT_COLUMNS = "*, exam:exams(*), student:students(id, name, student_id, class_name, department)"


class ExamRepository(TableRepository):
    table = "exams"
    read_key = EXAMS

    def list(self, department: str | None = None, class_name: str | None = None,
             academic_year: int | None = None) -> List[dict]:
        def fetch():
            query = self._query().order("exam_date", desc=True)
            if department:
                query = query.eq("department", department)
            if class_name:
                query = query.eq("class_name", class_name)
            if academic_year:
                query = query.eq("academic_year", academic_year)
            return query.execute().data

        return self._cached((EXAMS, department, class_name, academic_year), fetch)

    def create(self, record: dict) -> List[dict]:
        return self._insert("exams.create", self._stamp(record))

    def update(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("exams.update", row_id, changes)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("exams.delete", "id", row_id)

    # -- results -----------------------------------------------------------
    def results(self, exam_id: str | None = None, student_id: str | None = None) -> List[dict]:
        if not (exam_id or student_id):
            return []

        def fetch():
            query = self.db.table("exam_results").select(RESULT_COLUMNS)
            if exam_id:
                query = query.eq("exam_id", exam_id)
            if student_id:
                query = query.eq("student_id", student_id)
            return query.execute().data

        return self._cached((EXAM_RESULTS, exam_id, student_id), fetch)

    def _upsert_results(self, mutation: str, records: List[dict]) -> List[dict]:
        rows = collapse_duplicates((self._stamp(r) for r in records), CONFLICT_KEY)
        result = (
            self.db.table("exam_results")
            .upsert(rows, on_conflict=",".join(CONFLICT_KEY))
            .execute()
        )
        return self._written(mutation, result.data)

    def save_result(self, record: dict) -> List[dict]:
        return self._upsert_results("exams.save_result", [record])

    def bulk_save_results(self, records: List[dict]) -> List[dict]:
        return self._upsert_results("exams.bulk_save_results", records)

    def report_card(self, student_id: str, academic_year: int | None = None) -> List[dict]:
        def fetch():
            rows = (
                self.db.table("exam_results")
                .select("*, exam:exams(*)")
                .eq("student_id", student_id)
                .execute()
                .data
            )
            if academic_year:
                rows = [r for r in rows if (r.get("exam") or {}).get("academic_year") == academic_year]
            return rows

        return self._cached((REPORT_CARD, student_id, academic_year), fetch)

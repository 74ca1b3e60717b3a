from typing import List

from madrasah.core.cache import FEE_PAYMENTS, FEE_STRUCTURES
from madrasah.repositories.base import TableRepository
from madrasah.services.stats import student_fee_status

PAYMENT_COLUMNS = "*, students(name, student_id, class_name, department), fee_structures(fee_type)"


class FeeRepository(TableRepository):
    table = "fee_structures"
    read_key = FEE_STRUCTURES

    def list_structures(self) -> List[dict]:
        return self._cached(
            (FEE_STRUCTURES,),
            lambda: self._query().order("created_at", desc=True).execute().data,
        )

    def create_structure(self, record: dict) -> List[dict]:
        return self._insert("fees.create_structure", record)

    def update_structure(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("fees.update_structure", row_id, changes)

    def delete_structure(self, row_id: str) -> List[dict]:
        return self._delete("fees.delete_structure", "id", row_id)

    def list_payments(self, student_id: str | None = None) -> List[dict]:
        def fetch():
            query = (
                self.db.table("fee_payments")
                .select(PAYMENT_COLUMNS)
                .order("payment_date", desc=True)
            )
            if student_id:
                query = query.eq("student_id", student_id)
            return query.execute().data

        return self._cached((FEE_PAYMENTS, student_id), fetch)

    def get_payment(self, payment_id: str) -> dict | None:
        result = (
            self.db.table("fee_payments")
            .select(PAYMENT_COLUMNS)
            .eq("id", payment_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    def record_payment(self, record: dict) -> List[dict]:
        result = self.db.table("fee_payments").insert(self._stamp(record)).execute()
        return self._written("fees.record_payment", result.data)

    def student_status(self, student_id: str) -> dict | None:
        return student_fee_status(self.list_payments(student_id), self.list_structures())

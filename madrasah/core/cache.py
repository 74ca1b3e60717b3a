"""
Query cache + declared invalidation table.

Reads are cached under tuple keys whose first element is the read name
(e.g. ("attendance", "student", "2026-10-01")). A write never lists keys at
the call site: it names itself, and INVALIDATES says which reads it can change.
"""

import logging
import time
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)

# Read names
STUDENTS = "students"
STAFF = "staff"
ATTENDANCE = "attendance"
FEE_STRUCTURES = "fee-structures"
FEE_PAYMENTS = "fee-payments"
SALARY_PAYMENTS = "salary-payments"
EXPENSES = "expenses"
TRANSACTIONS = "transactions"
EXAMS = "exams"
EXAM_RESULTS = "exam-results"
REPORT_CARD = "student-report-card"
TIMETABLE = "timetable"
NOTICES = "notices"
DOCUMENTS = "documents"
DASHBOARD_STATS = "dashboard-stats"
REPORTS_DATA = "reports-data"
PROFILE = "profile"
EVENTS = "events"
HOMEWORK = "homework"
HOSTEL_ROOMS = "hostel-rooms"
HOSTEL_ALLOCATIONS = "hostel-allocations"

READ_KEYS = frozenset({
    STUDENTS, STAFF, ATTENDANCE, FEE_STRUCTURES, FEE_PAYMENTS, SALARY_PAYMENTS,
    EXPENSES, TRANSACTIONS, EXAMS, EXAM_RESULTS, REPORT_CARD, TIMETABLE,
    NOTICES, DOCUMENTS, DASHBOARD_STATS, REPORTS_DATA, PROFILE, EVENTS, HOMEWORK,
    HOSTEL_ROOMS, HOSTEL_ALLOCATIONS,
})

INVALIDATES: dict[str, tuple[str, ...]] = {
    "students.create": (STUDENTS, DASHBOARD_STATS),
    "students.update": (STUDENTS, DASHBOARD_STATS, FEE_PAYMENTS, EXAM_RESULTS, HOSTEL_ALLOCATIONS),
    "students.delete": (
        STUDENTS, DASHBOARD_STATS, FEE_PAYMENTS, EXAM_RESULTS, REPORT_CARD, ATTENDANCE, HOSTEL_ALLOCATIONS,
    ),
    "staff.create": (STAFF, DASHBOARD_STATS),
    "staff.update": (STAFF, DASHBOARD_STATS, SALARY_PAYMENTS, TIMETABLE, HOMEWORK),
    "staff.delete": (STAFF, DASHBOARD_STATS, SALARY_PAYMENTS, TIMETABLE, ATTENDANCE, HOMEWORK),
    "attendance.mark": (ATTENDANCE,),
    "attendance.bulk_mark": (ATTENDANCE,),
    "fees.create_structure": (FEE_STRUCTURES,),
    "fees.update_structure": (FEE_STRUCTURES, FEE_PAYMENTS),
    "fees.delete_structure": (FEE_STRUCTURES, FEE_PAYMENTS),
    "fees.record_payment": (FEE_PAYMENTS, DASHBOARD_STATS, REPORTS_DATA),
    "salaries.create": (SALARY_PAYMENTS, REPORTS_DATA),
    "expenses.create": (EXPENSES, DASHBOARD_STATS, REPORTS_DATA),
    "expenses.create_batch": (EXPENSES, DASHBOARD_STATS, REPORTS_DATA),
    "expenses.delete": (EXPENSES, DASHBOARD_STATS, REPORTS_DATA),
    "expenses.delete_batch": (EXPENSES, DASHBOARD_STATS, REPORTS_DATA),
    "transactions.create": (TRANSACTIONS, DASHBOARD_STATS, REPORTS_DATA),
    "transactions.delete": (TRANSACTIONS, DASHBOARD_STATS, REPORTS_DATA),
    "exams.create": (EXAMS,),
    "exams.update": (EXAMS, EXAM_RESULTS, REPORT_CARD),
    "exams.delete": (EXAMS, EXAM_RESULTS, REPORT_CARD),
    "exams.save_result": (EXAM_RESULTS, REPORT_CARD),
    "exams.bulk_save_results": (EXAM_RESULTS, REPORT_CARD),
    "timetable.create": (TIMETABLE,),
    "timetable.update": (TIMETABLE,),
    "timetable.delete": (TIMETABLE,),
    "notices.create": (NOTICES,),
    "notices.delete": (NOTICES,),
    "documents.upload": (DOCUMENTS,),
    "documents.delete": (DOCUMENTS,),
    "profile.update": (PROFILE,),
    "events.create": (EVENTS,),
    "events.update": (EVENTS,),
    "events.delete": (EVENTS,),
    "homework.create": (HOMEWORK,),
    "homework.update": (HOMEWORK,),
    "homework.delete": (HOMEWORK,),
    "hostel.create_room": (HOSTEL_ROOMS,),
    "hostel.update_room": (HOSTEL_ROOMS, HOSTEL_ALLOCATIONS),
    "hostel.delete_room": (HOSTEL_ROOMS, HOSTEL_ALLOCATIONS),
    "hostel.allocate": (HOSTEL_ALLOCATIONS, HOSTEL_ROOMS),
    "hostel.release": (HOSTEL_ALLOCATIONS, HOSTEL_ROOMS),
}


class QueryCache:
    def __init__(self, ttl_seconds: int = 30, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple, tuple[Any, float]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: tuple) -> bool:
        return self._fresh(key)

    def _fresh(self, key: tuple) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        if self.ttl_seconds and self._clock() - entry[1] > self.ttl_seconds:
            del self._entries[key]
            return False
        return True

    def get_or_fetch(self, key: tuple[Hashable, ...], fetch: Callable[[], Any]) -> Any:
        if key[0] not in READ_KEYS:
            raise KeyError(f"Undeclared read key: {key[0]!r}")
        if self._fresh(key):
            return self._entries[key][0]
        value = fetch()
        self._entries[key] = (value, self._clock())
        return value

    def invalidate(self, prefix: tuple[Hashable, ...]) -> int:
        n = len(prefix)
        stale = [k for k in self._entries if k[:n] == prefix]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def invalidate_for(self, mutation: str) -> int:
        """Drop every read the mutation is declared to affect."""
        dropped = sum(self.invalidate((name,)) for name in INVALIDATES[mutation])
        logger.debug("%s invalidated %d cached reads", mutation, dropped)
        return dropped

    def clear(self) -> None:
        self._entries.clear()

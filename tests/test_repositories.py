from datetime import date, datetime
from typing import List, get_type_hints

import pytest
from postgrest.exceptions import APIError

from madrasah.core.cache import DASHBOARD_STATS, FEE_PAYMENTS
from madrasah.core.enums import AllocationStatus, AttendanceStatus, SubjectType, WindowFilter
from madrasah.core.security import MOCK_USERS
from madrasah.repositories.attendance import AttendanceRepository
from madrasah.repositories.base import collapse_duplicates
from madrasah.repositories.dashboard import DashboardRepository
from madrasah.repositories.documents import DocumentRepository, storage_path
from madrasah.repositories.events import HomeworkRepository
from madrasah.repositories.exams import ExamRepository
from madrasah.repositories.expenses import ExpenseRepository
from madrasah.repositories.fees import FeeRepository
from madrasah.repositories.hostel import HostelRepository
from madrasah.repositories.students import StudentRepository

PRESENT = AttendanceStatus.PRESENT.value
ABSENT = AttendanceStatus.ABSENT.value
ADMIN_ID = MOCK_USERS["mock-admin"].user_id


def _mark(user_id, status, day="2026-10-17"):
    return {"user_id": user_id, "user_type": "student", "date": day, "status": status, "remarks": None}


def test_collapse_keeps_last_in_first_seen_order():
    records = [{"k": 1, "v": "a"}, {"k": 2, "v": "b"}, {"k": 1, "v": "c"}]
    assert collapse_duplicates(records, ("k",)) == [{"k": 1, "v": "c"}, {"k": 2, "v": "b"}]


def test_bulk_attendance_later_mark_wins_in_one_upsert(ctx, db):
    repo = AttendanceRepository(ctx, ADMIN_ID)

    repo.bulk_mark([_mark("s1", PRESENT), _mark("s2", PRESENT), _mark("s1", ABSENT)])

    rows = db.rows("attendance")
    assert len(rows) == 2
    assert next(r for r in rows if r["user_id"] == "s1")["status"] == ABSENT
    assert db.count("attendance", "upsert") == 1
    assert all(r["created_by"] == ADMIN_ID for r in rows)


def test_marking_again_overwrites(ctx, db):
    repo = AttendanceRepository(ctx, ADMIN_ID)

    repo.mark(_mark("s1", PRESENT))
    repo.mark(_mark("s1", ABSENT))

    assert [r["status"] for r in db.rows("attendance")] == [ABSENT]


def test_attendance_list_is_refetched_after_a_mark(ctx, db):
    repo = AttendanceRepository(ctx, ADMIN_ID)
    assert repo.list(SubjectType.STUDENT) == []

    repo.mark(_mark("s1", PRESENT))

    assert len(repo.list(SubjectType.STUDENT)) == 1


def test_attendance_stats_for_a_period(ctx, db):
    db.seed(
        "attendance",
        _mark("s1", PRESENT, "2026-10-01"),
        _mark("s1", AttendanceStatus.LATE.value, "2026-10-02"),
        _mark("s1", ABSENT, "2026-10-03"),
        _mark("s1", PRESENT, "2026-09-01"),
    )
    repo = AttendanceRepository(ctx, ADMIN_ID)

    stats = repo.stats("s1", SubjectType.STUDENT, date(2026, 10, 1), date(2026, 10, 31))

    assert stats["total_days"] == 3
    assert stats["attendance_percentage"] == pytest.approx(200 / 3)


def test_failed_bulk_upsert_propagates_as_one_error(ctx, db):
    db.fail("attendance", "upsert", APIError({"message": "violates foreign key", "code": "23503"}))
    repo = AttendanceRepository(ctx, ADMIN_ID)

    with pytest.raises(APIError):
        repo.bulk_mark([_mark("s1", PRESENT), _mark("s2", PRESENT)])

    assert db.rows("attendance") == []


def test_batch_delete_leaves_the_singleton(ctx, db):
    db.seed(
        "expenses",
        {"expense_id": "E1", "amount": 100, "batch_id": "B1", "batch_name": "Bazar", "expense_date": "2026-10-05"},
        {"expense_id": "E2", "amount": 50, "batch_id": "B1", "batch_name": "Bazar", "expense_date": "2026-10-05"},
        {"expense_id": "E3", "amount": 30, "batch_id": None, "expense_date": "2026-10-04"},
    )
    repo = ExpenseRepository(ctx, ADMIN_ID)
    now = datetime(2026, 10, 17)

    groups = repo.grouped(WindowFilter.MONTHLY, now)
    assert [(g["batch_id"], g["total"], g["count"]) for g in groups] == [("B1", 150, 2), (None, 30, 1)]

    deleted = repo.delete_batch("B1")

    assert len(deleted) == 2
    assert [r["expense_id"] for r in repo.list(WindowFilter.MONTHLY, now)] == ["E3"]


def test_create_batch_inserts_once_with_shared_id(ctx, db):
    repo = ExpenseRepository(ctx, ADMIN_ID)

    batch_id, rows = repo.create_batch(lambda bid: [
        {"expense_id": "E1", "amount": 10, "batch_id": bid, "expense_date": "2026-10-17"},
        {"expense_id": "E2", "amount": 20, "batch_id": bid, "expense_date": "2026-10-17"},
    ])

    assert db.count("expenses", "insert") == 1
    assert {r["batch_id"] for r in rows} == {batch_id}


def test_fee_payment_invalidates_dashboard_stats(ctx, db):
    db.seed("students", {"student_id": "S1", "department": "মক্তব", "status": "সক্রিয়"})
    dashboard = DashboardRepository(ctx, ADMIN_ID)
    dashboard.stats(date(2026, 10, 17))
    assert (DASHBOARD_STATS, "2026-10-01") in ctx.cache

    FeeRepository(ctx, ADMIN_ID).record_payment({
        "student_id": "S1", "fee_structure_id": "F1", "amount": 500, "payment_date": "2026-10-17",
    })

    assert (DASHBOARD_STATS, "2026-10-01") not in ctx.cache


def test_duplicate_student_id_raises_unique_error(ctx, db):
    repo = StudentRepository(ctx, ADMIN_ID)
    repo.create({"student_id": "S1", "name": "A"})

    with pytest.raises(APIError) as exc_info:
        repo.create({"student_id": "S1", "name": "B"})

    assert exc_info.value.code == "23505"


def test_bulk_results_upsert_per_exam_and_student(ctx, db):
    repo = ExamRepository(ctx, ADMIN_ID)
    repo.save_result({"exam_id": "X", "student_id": "s1", "marks_obtained": 10, "grade": "F"})

    repo.bulk_save_results([
        {"exam_id": "X", "student_id": "s1", "marks_obtained": 90, "grade": "A+"},
        {"exam_id": "X", "student_id": "s2", "marks_obtained": 50, "grade": "B"},
        {"exam_id": "X", "student_id": "s2", "marks_obtained": 55, "grade": "B"},
    ])

    rows = {r["student_id"]: r for r in db.rows("exam_results")}
    assert len(rows) == 2
    assert rows["s1"]["grade"] == "A+"
    assert rows["s2"]["marks_obtained"] == 55


def test_document_upload_stores_file_then_row(ctx, db):
    repo = DocumentRepository(ctx, ADMIN_ID)

    [row] = repo.upload(
        "Policy.PDF",
        b"%PDF-1.4",
        "application/pdf",
        lambda url, size, kind: {"title": "Policy", "file_url": url, "file_size": size, "file_type": kind},
    )

    [(bucket, path)] = db.storage.files
    assert bucket == "documents"
    assert path.startswith(f"{ADMIN_ID}/") and path.endswith(".pdf")
    assert row["file_url"].endswith(path)
    assert row["file_size"] == 8
    assert row["uploaded_by"] == ADMIN_ID


def test_storage_paths_do_not_collide():
    assert storage_path("u", "a.png") != storage_path("u", "a.png")


@pytest.mark.parametrize("method", [
    AttendanceRepository.bulk_mark,
    AttendanceRepository.for_person,
    ExamRepository.bulk_save_results,
    ExamRepository.report_card,
    ExpenseRepository.grouped,
])
def test_annotations_after_a_list_method_still_name_lists(method):
    assert get_type_hints(method)["return"] == List[dict]


def test_renaming_a_fee_type_refreshes_cached_payments(ctx, db):
    [structure] = db.seed("fee_structures", {"fee_type": "Monthly"})
    repo = FeeRepository(ctx, ADMIN_ID)
    repo.list_payments()
    assert (FEE_PAYMENTS, None) in ctx.cache

    repo.update_structure(structure["id"], {"fee_type": "Tuition"})

    assert (FEE_PAYMENTS, None) not in ctx.cache


def test_deleted_homework_is_only_hidden(ctx, db):
    [hw] = db.seed("homework", {"title": "Surah Mulk", "due_date": "2026-10-20", "is_active": True})
    repo = HomeworkRepository(ctx, ADMIN_ID)
    assert len(repo.list()) == 1

    repo.delete(hw["id"])

    assert repo.list() == []
    assert db.rows("homework")[0]["is_active"] is False


def test_allocation_and_release_move_room_occupancy(ctx, db):
    [room] = db.seed("hostel_rooms", {"room_number": "101", "capacity": 2, "current_occupancy": 0,
                                      "monthly_fee": 1500, "is_active": True})
    repo = HostelRepository(ctx, ADMIN_ID)

    [allocation] = repo.allocate(
        {"student_id": "s1", "room_id": room["id"], "status": AllocationStatus.ACTIVE.value}, room
    )
    assert repo.get(room["id"])["current_occupancy"] == 1
    assert [a["student_id"] for a in repo.allocations("s1")] == ["s1"]

    repo.release(allocation, repo.get(room["id"]), today=date(2026, 10, 17))

    stored = db.rows("hostel_allocations")[0]
    assert (stored["status"], stored["end_date"]) == (AllocationStatus.CANCELLED.value, "2026-10-17")
    assert repo.get(room["id"])["current_occupancy"] == 0
    assert repo.allocations("s1") == []


def test_release_never_takes_occupancy_below_zero(ctx, db):
    [room] = db.seed("hostel_rooms", {"room_number": "102", "capacity": 2, "current_occupancy": 0})
    [allocation] = db.seed("hostel_allocations", {"student_id": "s1", "room_id": room["id"],
                                                  "status": AllocationStatus.ACTIVE.value})

    HostelRepository(ctx, ADMIN_ID).release(allocation, room)

    assert db.rows("hostel_rooms")[0]["current_occupancy"] == 0

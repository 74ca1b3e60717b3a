import pytest

from madrasah.core.cache import (
    ATTENDANCE,
    DASHBOARD_STATS,
    EXAM_RESULTS,
    FEE_PAYMENTS,
    HOMEWORK,
    HOSTEL_ALLOCATIONS,
    INVALIDATES,
    READ_KEYS,
    REPORT_CARD,
    SALARY_PAYMENTS,
    STUDENTS,
    TIMETABLE,
    QueryCache,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_second_read_is_served_from_cache():
    cache = QueryCache()
    calls = []

    def fetch():
        calls.append(1)
        return ["row"]

    assert cache.get_or_fetch((STUDENTS,), fetch) == ["row"]
    assert cache.get_or_fetch((STUDENTS,), fetch) == ["row"]
    assert len(calls) == 1


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=30, clock=clock)
    cache.get_or_fetch((STUDENTS,), lambda: 1)

    clock.now = 31
    assert (STUDENTS,) not in cache
    assert cache.get_or_fetch((STUDENTS,), lambda: 2) == 2


def test_undeclared_read_name_is_refused():
    with pytest.raises(KeyError):
        QueryCache().get_or_fetch(("nonsense",), lambda: None)


def test_prefix_invalidation_drops_every_variant():
    cache = QueryCache()
    cache.get_or_fetch((ATTENDANCE, "student", "2026-10-01"), lambda: 1)
    cache.get_or_fetch((ATTENDANCE, "staff", None), lambda: 2)
    cache.get_or_fetch((STUDENTS,), lambda: 3)

    assert cache.invalidate((ATTENDANCE,)) == 2
    assert (STUDENTS,) in cache
    assert len(cache) == 1


def test_fee_payment_invalidates_dashboard_stats():
    cache = QueryCache()
    cache.get_or_fetch((DASHBOARD_STATS, "2026-10-01"), lambda: {})
    cache.get_or_fetch((FEE_PAYMENTS, None), lambda: [])
    cache.get_or_fetch((STUDENTS,), lambda: [])

    cache.invalidate_for("fees.record_payment")

    assert (DASHBOARD_STATS, "2026-10-01") not in cache
    assert (FEE_PAYMENTS, None) not in cache
    assert (STUDENTS,) in cache


def test_unknown_mutation_is_an_error():
    with pytest.raises(KeyError):
        QueryCache().invalidate_for("students.explode")


def test_every_invalidation_targets_a_declared_read():
    for mutation, reads in INVALIDATES.items():
        assert set(reads) <= READ_KEYS, mutation


# Reads whose rows embed another table, and the writes that change that table.
EMBEDDED_JOINS = {
    FEE_PAYMENTS: ("students.update", "students.delete", "fees.update_structure", "fees.delete_structure"),
    SALARY_PAYMENTS: ("staff.update", "staff.delete"),
    TIMETABLE: ("staff.update", "staff.delete"),
    HOMEWORK: ("staff.update", "staff.delete"),
    EXAM_RESULTS: ("students.update", "students.delete", "exams.update", "exams.delete"),
    REPORT_CARD: ("students.delete", "exams.update", "exams.delete"),
    HOSTEL_ALLOCATIONS: ("students.update", "students.delete", "hostel.update_room", "hostel.delete_room"),
}


@pytest.mark.parametrize("read", sorted(EMBEDDED_JOINS))
def test_writes_to_an_embedded_table_drop_the_embedding_read(read):
    for mutation in EMBEDDED_JOINS[read]:
        assert read in INVALIDATES[mutation], mutation


def test_seat_changes_refresh_rooms_and_allocations():
    for mutation in ("hostel.allocate", "hostel.release"):
        assert set(INVALIDATES[mutation]) == {"hostel-rooms", HOSTEL_ALLOCATIONS}

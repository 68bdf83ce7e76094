from datetime import date

import pytest

from src.database.record_store import RecordStore
from src.database.records import RecordKind, VisitRecord
from src.tasks import FollowupManager, extract_followups


def ids(obligations):
    return [o.ref_id for o in obligations]


def test_extract_orders_by_due_date_with_visits_first_on_ties(snapshot):
    obligations = extract_followups(snapshot.visits, snapshot.counsels)
    assert ids(obligations) == ["v1", "c2", "v3", "v4", "c1"]
    # v4 and c1 share 2025-03-01
    assert obligations[3].kind == RecordKind.VISIT
    assert obligations[4].kind == RecordKind.COUNSEL


def test_obligation_exists_iff_follow_up_date_set(snapshot):
    obligations = extract_followups(snapshot.visits, snapshot.counsels)
    with_dates = {r.id for r in snapshot.visits + snapshot.counsels if r.follow_up_date}
    assert set(ids(obligations)) == with_dates
    assert "v2" not in ids(obligations)
    assert "c3" not in ids(obligations)


def test_obligation_mirrors_source_record(snapshot):
    obligations = {o.ref_id: o for o in extract_followups(snapshot.visits, snapshot.counsels)}
    v1 = obligations["v1"]
    assert v1.member_id == "m1"
    assert v1.due_date == "2025-01-05"
    assert v1.note == "병원 재방문"
    assert v1.origin_date == "2025-01-10"
    assert v1.origin_type_label == "병문안"
    assert obligations["c2"].done is True
    assert obligations["c1"].origin_type_label == "가정"


def test_extraction_is_idempotent(manager):
    assert manager.get_all_followups() == manager.get_all_followups()


def test_extract_empty_inputs():
    assert extract_followups([], []) == []


def test_pending_excludes_done(manager):
    assert ids(manager.get_pending_followups()) == ["v1", "v3", "v4", "c1"]


def test_toggle_flips_source_record_and_persists(manager, store, persisted):
    assert manager.toggle_followup(RecordKind.VISIT, "v1") is True

    assert store.snapshot.visits[0].follow_up_done is True
    assert manager.get_followup(RecordKind.VISIT, "v1").done is True
    assert len(persisted) == 1
    kind, saved = persisted[0]
    assert kind == RecordKind.VISIT
    assert saved is store.snapshot


def test_toggle_twice_restores_initial_state(manager, snapshot):
    manager.toggle_followup(RecordKind.COUNSEL, "c2")
    manager.toggle_followup(RecordKind.COUNSEL, "c2")
    assert manager.store.snapshot == snapshot


def test_toggle_leaves_other_records_untouched(manager, snapshot):
    manager.toggle_followup(RecordKind.COUNSEL, "c1")
    after = manager.store.snapshot
    assert after.visits == snapshot.visits
    assert after.counsels[1:] == snapshot.counsels[1:]
    assert after.counsels[0].follow_up_done is True


def test_toggle_unknown_id_is_noop(manager, snapshot, persisted):
    assert manager.toggle_followup(RecordKind.VISIT, "missing") is False
    assert manager.store.snapshot == snapshot
    assert persisted == []


def test_toggle_matches_kind_as_well_as_id(manager, snapshot):
    # c1 is a counsel id, so no visit matches
    assert manager.toggle_followup(RecordKind.VISIT, "c1") is False
    assert manager.store.snapshot == snapshot


def test_toggle_rejects_kinds_without_follow_ups(manager):
    with pytest.raises(ValueError):
        manager.toggle_followup(RecordKind.PRAYER, "p1")


def test_failed_persist_keeps_local_change(snapshot, today):
    def broken(kind, snap):
        raise ConnectionError("offline")

    manager = FollowupManager(RecordStore(snapshot, persist=broken), clock=lambda: today)
    assert manager.toggle_followup(RecordKind.VISIT, "v3") is True
    assert manager.get_followup(RecordKind.VISIT, "v3").done is True


def test_shared_due_date_keeps_both_items(manager):
    manager.toggle_followup(RecordKind.VISIT, "v4")
    by_id = {o.ref_id: o for o in manager.get_all_followups()}
    assert by_id["v4"].done is True
    assert by_id["c1"].done is False


def test_reschedule_and_clear(manager, persisted):
    assert manager.reschedule_followup(RecordKind.VISIT, "v1", "2025.1.20") is True
    assert manager.get_followup(RecordKind.VISIT, "v1").due_date == "2025-01-20"

    assert manager.clear_followup(RecordKind.COUNSEL, "c1") is True
    assert manager.get_followup(RecordKind.COUNSEL, "c1") is None
    assert len(persisted) == 2


def test_setting_a_date_creates_an_obligation(manager):
    assert manager.get_followup(RecordKind.VISIT, "v2") is None
    manager.store.set_follow_up(RecordKind.VISIT, "v2", "2025-01-15", note="전화")
    obligation = manager.get_followup(RecordKind.VISIT, "v2")
    assert obligation.due_date == "2025-01-15"
    assert obligation.note == "전화"
    assert obligation.done is False


def test_statistics(manager, today):
    stats = manager.get_statistics(today=today, urgent_window_days=3)
    assert stats == {
        "total_pending": 4,
        "overdue_count": 1,
        "due_today": 1,
        "upcoming_count": 2,
        "done_count": 1,
        "urgent_count": 2,
    }


def test_statistics_use_injected_clock(store):
    manager = FollowupManager(store, clock=lambda: date(2025, 3, 1))
    stats = manager.get_statistics(urgent_window_days=3)
    assert stats["overdue_count"] == 2
    assert stats["due_today"] == 2
    assert stats["upcoming_count"] == 0


def test_records_without_follow_up_fields_default_empty():
    visit = VisitRecord(id="v", member_id="m")
    assert extract_followups([visit], []) == []

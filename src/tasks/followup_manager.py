"""
Follow-up manager for pastoral visits and counseling sessions.
Derives follow-up obligations from source records and flips their completion
state; obligations themselves are never stored.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional
from loguru import logger

from ..core.config import get_settings
from ..core.dates import day_offset, local_today
from ..core.labels import COUNSEL_TYPE_LABELS, VISIT_TYPE_LABELS
from ..database.record_store import RecordStore
from ..database.records import CounselingRecord, RecordKind, VisitRecord


@dataclass(frozen=True)
class FollowUpObligation:
    """A pending (or completed) pastoral follow-up derived from a source record."""
    kind: RecordKind
    ref_id: str
    member_id: str
    due_date: str
    note: str
    done: bool
    origin_date: str
    origin_type_label: str


def _from_visit(visit: VisitRecord) -> FollowUpObligation:
    return FollowUpObligation(
        kind=RecordKind.VISIT,
        ref_id=visit.id,
        member_id=visit.member_id,
        due_date=visit.follow_up_date,
        note=visit.follow_up_note,
        done=visit.follow_up_done,
        origin_date=visit.date,
        origin_type_label=VISIT_TYPE_LABELS.get(visit.type.value, visit.type.value),
    )


def _from_counsel(counsel: CounselingRecord) -> FollowUpObligation:
    return FollowUpObligation(
        kind=RecordKind.COUNSEL,
        ref_id=counsel.id,
        member_id=counsel.member_id,
        due_date=counsel.follow_up_date,
        note=counsel.follow_up_note,
        done=counsel.follow_up_done,
        origin_date=counsel.date,
        origin_type_label=COUNSEL_TYPE_LABELS.get(counsel.type.value, counsel.type.value),
    )


def extract_followups(visits: Iterable[VisitRecord],
                      counsels: Iterable[CounselingRecord]) -> List[FollowUpObligation]:
    """
    Project visit and counsel records onto follow-up obligations.

    Args:
        visits: Visit records in source order
        counsels: Counseling records in source order

    Returns:
        One obligation per record with a non-empty follow-up date, ascending
        by due date; ties keep visits before counsels in source order
    """
    obligations = [_from_visit(v) for v in visits if v.follow_up_date]
    obligations.extend(_from_counsel(c) for c in counsels if c.follow_up_date)
    # sorted() is stable, so equal due dates keep input order
    return sorted(obligations, key=lambda o: o.due_date)


class FollowupManager:
    """Manages follow-up obligations over a record store."""

    def __init__(self, store: RecordStore, clock: Optional[Callable[[], date]] = None):
        """Initialize the follow-up manager."""
        self.store = store
        self.clock = clock or local_today

    def get_all_followups(self) -> List[FollowUpObligation]:
        """Recompute every obligation from the current snapshot."""
        snapshot = self.store.snapshot
        obligations = extract_followups(snapshot.visits, snapshot.counsels)
        logger.debug(f"Recomputed {len(obligations)} follow-up obligations")
        return obligations

    def get_pending_followups(self) -> List[FollowUpObligation]:
        return [o for o in self.get_all_followups() if not o.done]

    def get_followup(self, kind: RecordKind, ref_id: str) -> Optional[FollowUpObligation]:
        return next(
            (o for o in self.get_all_followups() if o.kind == kind and o.ref_id == ref_id),
            None,
        )

    def toggle_followup(self, kind: RecordKind, ref_id: str) -> bool:
        """
        Flip the follow-up done flag on the matching source record.

        Args:
            kind: RecordKind.VISIT or RecordKind.COUNSEL
            ref_id: ID of the source record

        Returns:
            True if a record was toggled, False if no record matched
        """
        toggled = self.store.update_record(
            kind, ref_id, lambda record: replace(record, follow_up_done=not record.follow_up_done)
        )
        if toggled:
            logger.info(f"Toggled follow-up for {kind.value} {ref_id}")
        return toggled

    def reschedule_followup(self, kind: RecordKind, ref_id: str, due_date: str) -> bool:
        """Move a follow-up to a new due date (edits the source record)."""
        return self.store.set_follow_up(kind, ref_id, due_date)

    def clear_followup(self, kind: RecordKind, ref_id: str) -> bool:
        """Remove a follow-up by clearing the source record's follow-up date."""
        return self.store.set_follow_up(kind, ref_id, "")

    def get_statistics(self, today: Optional[date] = None,
                       urgent_window_days: Optional[int] = None) -> Dict:
        """Get follow-up statistics."""
        today = today or self.clock()
        if urgent_window_days is None:
            urgent_window_days = get_settings().urgent_window_days
        obligations = self.get_all_followups()
        pending = [o for o in obligations if not o.done]
        offsets = [day_offset(o.due_date, today) for o in pending]

        return {
            "total_pending": len(pending),
            "overdue_count": len([d for d in offsets if d < 0]),
            "due_today": len([d for d in offsets if d == 0]),
            "upcoming_count": len([d for d in offsets if d > 0]),
            "done_count": len(obligations) - len(pending),
            "urgent_count": len([d for d in offsets if d <= urgent_window_days]),
        }

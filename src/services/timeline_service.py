"""
Timeline aggregation across pastoral record kinds.
Merges visits, counseling sessions and optionally prayer requests and memos
into one date-descending history, per member or congregation-wide.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional
from loguru import logger

from ..core.dates import local_today, month_membership, previous_month
from ..database.record_store import MemberDirectory, RecordStore
from ..database.records import (
    CounselingRecord,
    MemoRecord,
    PastoralRecord,
    PrayerRecord,
    PrayerStatus,
    RecordKind,
    VisitRecord,
    VisitStatus,
)


class TimelineFilter(Enum):
    """Kind filter applied after ordering."""
    ALL = "all"
    VISIT = "visit"
    COUNSEL = "counsel"
    PRAYER = "prayer"
    MEMO = "memo"


@dataclass(frozen=True)
class TimelineEntry:
    """One record projected onto the timeline."""
    id: str
    kind: RecordKind
    date: str
    member_id: str
    member_name: str
    summary: str
    type_key: str
    status_key: Optional[str] = None
    confidential: Optional[bool] = None  # counseling only
    time: str = ""


def to_entry(record: PastoralRecord, directory: MemberDirectory) -> TimelineEntry:
    """Project any pastoral record onto a timeline entry."""
    name = directory.name_of(record.member_id)
    if isinstance(record, VisitRecord):
        return TimelineEntry(
            id=record.id,
            kind=RecordKind.VISIT,
            date=record.date,
            member_id=record.member_id,
            member_name=name,
            summary=record.summary,
            type_key=record.type.value,
            status_key=record.status.value,
            time=record.time,
        )
    if isinstance(record, CounselingRecord):
        return TimelineEntry(
            id=record.id,
            kind=RecordKind.COUNSEL,
            date=record.date,
            member_id=record.member_id,
            member_name=name,
            summary=record.summary,
            type_key=record.type.value,
            confidential=record.confidential,
        )
    if isinstance(record, PrayerRecord):
        return TimelineEntry(
            id=record.id,
            kind=RecordKind.PRAYER,
            date=record.date,
            member_id=record.member_id,
            member_name=name,
            summary=record.text,
            type_key=record.category.value,
            status_key=record.status.value,
        )
    if isinstance(record, MemoRecord):
        return TimelineEntry(
            id=record.id,
            kind=RecordKind.MEMO,
            date=record.date,
            member_id=record.member_id,
            member_name=name,
            summary=record.text,
            type_key=record.category.value,
        )
    raise TypeError(f"Not a pastoral record: {type(record).__name__}")


def merge_timeline(groups: Iterable[Iterable[PastoralRecord]],
                   directory: MemberDirectory) -> List[TimelineEntry]:
    """
    Merge record groups into one date-descending list.

    Groups are concatenated in the given order before a stable sort, so
    records sharing a date keep group order, then source order.
    """
    entries = [to_entry(record, directory) for group in groups for record in group]
    return sorted(entries, key=lambda e: e.date, reverse=True)


class TimelineAggregator:
    """Builds member and congregation timelines from a record store."""

    def __init__(self, store: RecordStore):
        """Initialize the timeline aggregator."""
        self.store = store

    def build_timeline(self, member_id: Optional[str] = None,
                       kind_filter: TimelineFilter = TimelineFilter.ALL,
                       include_prayers: bool = False,
                       include_memos: bool = False,
                       search: str = "") -> List[TimelineEntry]:
        """
        Build a merged timeline.

        Args:
            member_id: Restrict to one member; None for the whole congregation
            kind_filter: Keep only one record kind (applied after sorting)
            include_prayers: Add prayer requests to the merge
            include_memos: Add administrative memos to the merge
            search: Case-insensitive match on member name or summary

        Returns:
            Timeline entries, newest first
        """
        snapshot = self.store.snapshot
        directory = self.store.directory()

        groups: List[Iterable[PastoralRecord]] = [snapshot.visits, snapshot.counsels]
        if include_prayers:
            groups.append(snapshot.prayers)
        if include_memos:
            groups.append(snapshot.memos)

        if member_id is not None:
            groups = [[r for r in group if r.member_id == member_id] for group in groups]

        entries = merge_timeline(groups, directory)

        if kind_filter != TimelineFilter.ALL:
            entries = [e for e in entries if e.kind.value == kind_filter.value]

        query = (search or "").strip().lower()
        if query:
            entries = [
                e for e in entries
                if query in e.member_name.lower() or query in (e.summary or "").lower()
            ]

        logger.debug(f"Built timeline with {len(entries)} entries (member={member_id})")
        return entries

    def member_history(self, member_id: str) -> List[TimelineEntry]:
        """Visits, counsels and memos of one member, newest first."""
        return self.build_timeline(member_id=member_id, include_memos=True)

    def summarize_member(self, member_id: str) -> Dict:
        """Record counts and latest dates for one member."""
        snapshot = self.store.snapshot
        visits = [v for v in snapshot.visits if v.member_id == member_id]
        counsels = [c for c in snapshot.counsels if c.member_id == member_id]

        return {
            "member_id": member_id,
            "member_name": self.store.directory().name_of(member_id),
            "visit_count": len(visits),
            "counsel_count": len(counsels),
            "active_prayer_count": len([
                p for p in snapshot.prayers
                if p.member_id == member_id and p.status == PrayerStatus.ACTIVE
            ]),
            "memo_count": len([m for m in snapshot.memos if m.member_id == member_id]),
            "last_visit_date": max((v.date for v in visits), default=""),
            "last_counsel_date": max((c.date for c in counsels), default=""),
        }

    def monthly_activity(self, reference: Optional[date] = None) -> Dict:
        """
        Compare this month's visits and counseling sessions with last month's.

        Args:
            reference: Day inside "this month"; sampled from the clock when omitted

        Returns:
            Dictionary with monthly counts, their differences and this month's
            completed/scheduled visit counts
        """
        reference = reference or local_today()
        last_month = previous_month(reference)
        snapshot = self.store.snapshot

        visits = [v for v in snapshot.visits if month_membership(v.date, reference)]
        counsels = [c for c in snapshot.counsels if month_membership(c.date, reference)]
        last_visits = len([v for v in snapshot.visits if month_membership(v.date, last_month)])
        last_counsels = len([c for c in snapshot.counsels if month_membership(c.date, last_month)])

        return {
            "visits_this_month": len(visits),
            "visits_last_month": last_visits,
            "visit_diff": len(visits) - last_visits,
            "counsels_this_month": len(counsels),
            "counsels_last_month": last_counsels,
            "counsel_diff": len(counsels) - last_counsels,
            "completed_visits": len([v for v in visits if v.status == VisitStatus.COMPLETED]),
            "scheduled_visits": len([v for v in visits if v.status == VisitStatus.SCHEDULED]),
        }

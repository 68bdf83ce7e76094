"""
Follow-up queue: classifies obligations by due-state and serves the
all / overdue / today / upcoming / done tabs as pure filters.
"""

from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional
from loguru import logger

from ..core.config import get_settings
from ..core.dates import day_offset, local_today, relative_label
from ..database.records import RecordKind
from .followup_manager import FollowUpObligation, FollowupManager


class DueState(Enum):
    """Due-state of an obligation relative to today (never stored)."""
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"
    DONE = "done"


class QueueTab(Enum):
    """Follow-up queue tabs."""
    ALL = "all"
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"
    DONE = "done"


def classify(obligation: FollowUpObligation, today: date) -> DueState:
    """Return the due-state of an obligation on the given day."""
    if obligation.done:
        return DueState.DONE
    offset = day_offset(obligation.due_date, today)
    if offset < 0:
        return DueState.OVERDUE
    if offset == 0:
        return DueState.TODAY
    return DueState.UPCOMING


def filter_tab(obligations: List[FollowUpObligation], tab: QueueTab,
               today: date) -> List[FollowUpObligation]:
    """
    Filter obligations for a queue tab without reordering them.

    Args:
        obligations: Obligations ascending by due date
        tab: Tab to show; ALL lists every pending obligation
        today: Reference day for due-state classification

    Returns:
        Matching obligations in input order
    """
    if tab == QueueTab.ALL:
        return [o for o in obligations if not o.done]
    if tab == QueueTab.DONE:
        return [o for o in obligations if o.done]

    wanted = {
        QueueTab.OVERDUE: DueState.OVERDUE,
        QueueTab.TODAY: DueState.TODAY,
        QueueTab.UPCOMING: DueState.UPCOMING,
    }[tab]
    return [o for o in obligations if classify(o, today) == wanted]


class FollowupQueue:
    """Due-state view over the follow-up manager's obligations."""

    def __init__(self, manager: FollowupManager,
                 clock: Optional[Callable[[], date]] = None):
        """Initialize the follow-up queue."""
        self.manager = manager
        self.clock = clock or manager.clock or local_today

    def _today(self, today: Optional[date]) -> date:
        # sampled per call so a long-lived queue follows the wall clock
        return today or self.clock()

    def tab(self, tab: QueueTab, today: Optional[date] = None) -> List[FollowUpObligation]:
        """Obligations shown under a tab."""
        return filter_tab(self.manager.get_all_followups(), tab, self._today(today))

    def partition(self, today: Optional[date] = None) -> Dict[DueState, List[FollowUpObligation]]:
        """Split all obligations into due-state buckets in one pass."""
        today = self._today(today)
        buckets: Dict[DueState, List[FollowUpObligation]] = {state: [] for state in DueState}
        for obligation in self.manager.get_all_followups():
            buckets[classify(obligation, today)].append(obligation)
        return buckets

    def toggle(self, kind: RecordKind, ref_id: str) -> bool:
        """Flip completion of one obligation via its source record."""
        return self.manager.toggle_followup(kind, ref_id)

    def urgent(self, today: Optional[date] = None, window_days: Optional[int] = None,
               limit: Optional[int] = None) -> List[FollowUpObligation]:
        """
        Pending obligations due within the urgent window (overdue included).

        Args:
            today: Reference day
            window_days: Days ahead to include; defaults to settings
            limit: Maximum number of items; defaults to settings

        Returns:
            The earliest-due pending obligations within the window
        """
        settings = get_settings()
        if window_days is None:
            window_days = settings.urgent_window_days
        if limit is None:
            limit = settings.urgent_limit

        today = self._today(today)
        pending = filter_tab(self.manager.get_all_followups(), QueueTab.ALL, today)
        return [o for o in pending if day_offset(o.due_date, today) <= window_days][:limit]

    def describe(self, obligation: FollowUpObligation, today: Optional[date] = None) -> Dict:
        """Presentation-neutral view of one obligation for a given day."""
        today = self._today(today)
        return {
            "kind": obligation.kind.value,
            "ref_id": obligation.ref_id,
            "member_id": obligation.member_id,
            "due_date": obligation.due_date,
            "relative": relative_label(obligation.due_date, today),
            "due_state": classify(obligation, today).value,
            "note": obligation.note,
            "origin_date": obligation.origin_date,
            "origin_type": obligation.origin_type_label,
        }

    def overdue_summary(self, today: Optional[date] = None) -> Dict:
        """
        Get a summary of overdue obligations.

        Returns:
            Dictionary with the overdue count and day statistics
        """
        today = self._today(today)
        overdue = filter_tab(self.manager.get_all_followups(), QueueTab.OVERDUE, today)
        overdue_days = [-day_offset(o.due_date, today) for o in overdue]

        if overdue:
            logger.info(f"{len(overdue)} follow-ups overdue as of {today.isoformat()}")

        return {
            "total_overdue": len(overdue),
            "average_overdue_days": round(sum(overdue_days) / len(overdue_days), 1) if overdue_days else 0,
            "max_overdue_days": max(overdue_days) if overdue_days else 0,
            "by_kind": {
                kind.value: len([o for o in overdue if o.kind == kind])
                for kind in (RecordKind.VISIT, RecordKind.COUNSEL)
            },
        }

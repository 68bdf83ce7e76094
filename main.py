#!/usr/bin/env python3
"""
Pastoral Care Tracker - Console Entry Point
Prints the follow-up queue and the latest congregation timeline for a
record snapshot.

Usage:
    python main.py [snapshot.json]

The snapshot path defaults to SNAPSHOT_PATH from the environment or .env file.
"""

import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from src.core.config import get_settings
from src.core.labels import (
    APP_TITLE,
    APP_VERSION,
    COUNSEL_TYPE_LABELS,
    KIND_ICONS,
    MEMO_CATEGORY_LABELS,
    PRAYER_CATEGORY_LABELS,
    PRAYER_STATUS_LABELS,
    QUEUE_TAB_LABELS,
    VISIT_STATUS_LABELS,
    VISIT_TYPE_LABELS,
)
from src.database.record_store import JsonSnapshotFile, RecordStore
from src.services.timeline_service import TimelineAggregator, TimelineEntry
from src.tasks import FollowupManager, FollowupQueue, QueueTab


TIMELINE_PREVIEW = 10

TYPE_LABELS = {
    "visit": VISIT_TYPE_LABELS,
    "counsel": COUNSEL_TYPE_LABELS,
    "prayer": PRAYER_CATEGORY_LABELS,
    "memo": MEMO_CATEGORY_LABELS,
}

STATUS_LABELS = {
    "visit": VISIT_STATUS_LABELS,
    "prayer": PRAYER_STATUS_LABELS,
}


def setup_logging(settings):
    """Setup application logging."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if settings.debug else "WARNING")
    logger.add(
        settings.log_file,
        level=settings.log_level,
        rotation="10 MB",
        retention="30 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
    )
    logger.info(f"{settings.app_name} | Starting...")


def print_queue(store: RecordStore, queue: FollowupQueue):
    """Print every queue tab with its obligations."""
    directory = store.directory()
    for tab in QueueTab:
        items = queue.tab(tab)
        print(f"\n[{QUEUE_TAB_LABELS[tab.value]}] {len(items)}")
        for obligation in items:
            view = queue.describe(obligation)
            name = directory.name_of(obligation.member_id)
            note = view["note"] or "후속 조치 필요"
            print(f"  {KIND_ICONS[view['kind']]} {name} · {view['origin_type']} "
                  f"| {view['due_date']} ({view['relative']}) | {note}")


def format_entry(entry: TimelineEntry) -> str:
    """One console line for a timeline entry."""
    kind = entry.kind.value
    type_label = TYPE_LABELS[kind].get(entry.type_key, entry.type_key)
    status = ""
    if entry.status_key:
        status = f" [{STATUS_LABELS[kind].get(entry.status_key, entry.status_key)}]"
    lock = " 🔒" if entry.confidential else ""
    return (f"{entry.date} {KIND_ICONS[kind]} {entry.member_name}{lock} · "
            f"{type_label}{status} · {entry.summary}")


def print_timeline(aggregator: TimelineAggregator):
    """Print the most recent congregation timeline entries."""
    entries = aggregator.build_timeline(include_prayers=True, include_memos=True)
    print(f"\n[타임라인] {len(entries)}")
    for entry in entries[:TIMELINE_PREVIEW]:
        print(f"  {format_entry(entry)}")


def main():
    """Main entry point."""
    load_dotenv(find_dotenv())
    settings = get_settings()
    setup_logging(settings)

    snapshot_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(settings.snapshot_path)
    snapshot_file = JsonSnapshotFile(str(snapshot_path))
    store = RecordStore(snapshot_file.load(), persist=snapshot_file)

    manager = FollowupManager(store)
    queue = FollowupQueue(manager)
    aggregator = TimelineAggregator(store)

    print("=" * 60)
    print(f"{APP_TITLE} v{APP_VERSION}")
    print("=" * 60)

    try:
        print_queue(store, queue)
        print_timeline(aggregator)
        print(f"\n통계: {manager.get_statistics()}")
        print(f"월간 비교: {aggregator.monthly_activity()}")
    except Exception as e:
        logger.error(f"Application error: {e}")
        print(f"Error: {e}")
        print("Check the logs for more details.")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Shared fixtures: a small congregation snapshot pinned to 2025-01-10.
"""

from datetime import date

import pytest

from src.database.record_store import RecordStore
from src.database.records import (
    CounselType,
    CounselingRecord,
    Member,
    MemoCategory,
    MemoRecord,
    PastoralSnapshot,
    PrayerCategory,
    PrayerRecord,
    PrayerStatus,
    VisitRecord,
    VisitStatus,
    VisitType,
)
from src.tasks import FollowupManager, FollowupQueue


TODAY = date(2025, 1, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def snapshot():
    members = (
        Member(id="m1", name="김철수", group="1구역", role="집사"),
        Member(id="m2", name="이영희", group="2구역", role="권사"),
    )
    visits = (
        VisitRecord(id="v1", member_id="m1", type=VisitType.SICK, date="2025-01-10",
                    status=VisitStatus.COMPLETED, summary="입원 중 병문안",
                    follow_up_date="2025-01-05", follow_up_note="병원 재방문"),
        VisitRecord(id="v2", member_id="m2", type=VisitType.REGULAR, date="2025-01-03",
                    summary="정기 심방"),
        VisitRecord(id="v3", member_id="m1", type=VisitType.NEW_FAMILY, date="2025-01-08",
                    time="14:00", summary="새가족 환영", follow_up_date="2025-01-10"),
        VisitRecord(id="v4", member_id="m3", type=VisitType.CRISIS, date="2025-01-08",
                    summary="가정 위기", follow_up_date="2025-03-01"),
    )
    counsels = (
        CounselingRecord(id="c1", member_id="m1", type=CounselType.FAMILY, date="2025-01-08",
                         summary="부부 상담", confidential=True, follow_up_date="2025-03-01"),
        CounselingRecord(id="c2", member_id="m2", type=CounselType.FAITH, date="2025-01-02",
                         summary="신앙 고민", follow_up_date="2025-01-09", follow_up_done=True),
        CounselingRecord(id="c3", member_id="m2", type=CounselType.CAREER, date="2025-01-11",
                         summary="진로 상담"),
    )
    prayers = (
        PrayerRecord(id="p1", member_id="m1", text="수술 회복", date="2025-01-09",
                     category=PrayerCategory.HEALTH),
        PrayerRecord(id="p2", member_id="m2", text="취업", date="2024-12-25",
                     category=PrayerCategory.CAREER, status=PrayerStatus.ANSWERED),
    )
    memos = (
        MemoRecord(id="me1", member_id="m1", text="주소 변경", date="2025-01-10",
                   category=MemoCategory.ADMIN),
    )
    return PastoralSnapshot(members=members, visits=visits, counsels=counsels,
                            prayers=prayers, memos=memos)


@pytest.fixture
def persisted():
    return []


@pytest.fixture
def store(snapshot, persisted):
    return RecordStore(snapshot, persist=lambda kind, snap: persisted.append((kind, snap)))


@pytest.fixture
def manager(store):
    return FollowupManager(store, clock=lambda: TODAY)


@pytest.fixture
def queue(manager):
    return FollowupQueue(manager)

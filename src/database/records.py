"""
Pastoral care record models and row mapping.
Each record kind is its own frozen dataclass; rows coming from the remote
store (snake_case or camelCase keys) are mapped here and their dates
canonicalized to "YYYY-MM-DD".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple, Type, TypeVar, Union
from loguru import logger

from ..core.dates import normalize_date


class RecordKind(Enum):
    """Kinds of pastoral records that can appear on a timeline."""
    VISIT = "visit"
    COUNSEL = "counsel"
    PRAYER = "prayer"
    MEMO = "memo"


class VisitType(Enum):
    SICK = "sick"
    NEW_FAMILY = "new_family"
    REGULAR = "regular"
    CRISIS = "crisis"
    CELEBRATION = "celebration"
    ROUTINE = "routine"


class VisitStatus(Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class CounselType(Enum):
    FAMILY = "family"
    FAITH = "faith"
    CAREER = "career"
    HEALTH = "health"
    FINANCE = "finance"
    OTHER = "other"


class PrayerCategory(Enum):
    HEALTH = "health"
    FAMILY = "family"
    CAREER = "career"
    FAITH = "faith"
    SETTLEMENT = "settlement"
    MISSION = "mission"
    OTHER = "other"


class PrayerStatus(Enum):
    ACTIVE = "active"
    ANSWERED = "answered"


class MemoCategory(Enum):
    ADMIN = "admin"
    ASSIGNMENT = "assignment"
    CONNECTION = "connection"
    NOTABLE = "notable"
    OTHER = "other"


@dataclass(frozen=True)
class Member:
    """A congregation member referenced by pastoral records."""
    id: str
    name: str = ""
    group: str = ""
    role: str = ""
    phone: str = ""
    note: str = ""


@dataclass(frozen=True)
class VisitRecord:
    """A pastoral visit (심방)."""
    id: str
    member_id: str
    type: VisitType = VisitType.ROUTINE
    date: str = ""
    time: str = ""
    location: str = ""
    status: VisitStatus = VisitStatus.SCHEDULED
    summary: str = ""
    prayer_note: str = ""
    follow_up_date: str = ""
    follow_up_note: str = ""
    follow_up_done: bool = False


@dataclass(frozen=True)
class CounselingRecord:
    """A counseling session (상담)."""
    id: str
    member_id: str
    type: CounselType = CounselType.OTHER
    date: str = ""
    summary: str = ""
    confidential: bool = False
    follow_up_date: str = ""
    follow_up_note: str = ""
    follow_up_done: bool = False


@dataclass(frozen=True)
class PrayerRecord:
    """A prayer request (기도제목)."""
    id: str
    member_id: str
    text: str = ""
    date: str = ""
    category: PrayerCategory = PrayerCategory.OTHER
    status: PrayerStatus = PrayerStatus.ACTIVE


@dataclass(frozen=True)
class MemoRecord:
    """An administrative memo about a member."""
    id: str
    member_id: str
    text: str = ""
    date: str = ""
    category: MemoCategory = MemoCategory.OTHER


PastoralRecord = Union[VisitRecord, CounselingRecord, PrayerRecord, MemoRecord]
FollowUpSource = Union[VisitRecord, CounselingRecord]

E = TypeVar("E", bound=Enum)


def record_kind(record: PastoralRecord) -> RecordKind:
    """Return the kind tag of a record."""
    if isinstance(record, VisitRecord):
        return RecordKind.VISIT
    if isinstance(record, CounselingRecord):
        return RecordKind.COUNSEL
    if isinstance(record, PrayerRecord):
        return RecordKind.PRAYER
    if isinstance(record, MemoRecord):
        return RecordKind.MEMO
    raise TypeError(f"Not a pastoral record: {type(record).__name__}")


# Row mapping helpers

def _pick(row: Dict[str, Any], snake: str, camel: str, default: Any = "") -> Any:
    value = row.get(snake)
    if value is None:
        value = row.get(camel)
    return default if value is None else value


def _text(row: Dict[str, Any], snake: str, camel: str = None) -> str:
    return str(_pick(row, snake, camel or snake))


def _flag(row: Dict[str, Any], snake: str, camel: str = None) -> bool:
    return bool(_pick(row, snake, camel or snake, False))


def _enum(enum_cls: Type[E], raw: Any, default: E) -> E:
    if raw is None or raw == "":
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} value {raw!r}, using {default.value}")
        return default


def member_from_row(row: Dict[str, Any]) -> Member:
    return Member(
        id=_text(row, "id"),
        name=_text(row, "name"),
        group=_text(row, "group"),
        role=_text(row, "role"),
        phone=_text(row, "phone"),
        note=_text(row, "note"),
    )


def visit_from_row(row: Dict[str, Any]) -> VisitRecord:
    """Map a store row to a VisitRecord."""
    return VisitRecord(
        id=_text(row, "id"),
        member_id=_text(row, "member_id", "memberId"),
        type=_enum(VisitType, row.get("type"), VisitType.ROUTINE),
        date=normalize_date(row.get("date")),
        time=_text(row, "time"),
        location=_text(row, "location"),
        status=_enum(VisitStatus, row.get("status"), VisitStatus.SCHEDULED),
        summary=_text(row, "summary"),
        prayer_note=_text(row, "prayer_note", "prayerNote"),
        follow_up_date=normalize_date(_pick(row, "follow_up_date", "followUpDate")),
        follow_up_note=_text(row, "follow_up_note", "followUpNote"),
        follow_up_done=_flag(row, "follow_up_done", "followUpDone"),
    )


def counsel_from_row(row: Dict[str, Any]) -> CounselingRecord:
    """Map a store row to a CounselingRecord."""
    return CounselingRecord(
        id=_text(row, "id"),
        member_id=_text(row, "member_id", "memberId"),
        type=_enum(CounselType, row.get("type"), CounselType.OTHER),
        date=normalize_date(row.get("date")),
        summary=_text(row, "summary"),
        confidential=_flag(row, "confidential"),
        follow_up_date=normalize_date(_pick(row, "follow_up_date", "followUpDate")),
        follow_up_note=_text(row, "follow_up_note", "followUpNote"),
        follow_up_done=_flag(row, "follow_up_done", "followUpDone"),
    )


def prayer_from_row(row: Dict[str, Any]) -> PrayerRecord:
    return PrayerRecord(
        id=_text(row, "id"),
        member_id=_text(row, "member_id", "memberId"),
        text=_text(row, "text"),
        date=normalize_date(row.get("date")),
        category=_enum(PrayerCategory, row.get("category"), PrayerCategory.OTHER),
        status=_enum(PrayerStatus, row.get("status"), PrayerStatus.ACTIVE),
    )


def memo_from_row(row: Dict[str, Any]) -> MemoRecord:
    return MemoRecord(
        id=_text(row, "id"),
        member_id=_text(row, "member_id", "memberId"),
        text=_text(row, "text"),
        date=normalize_date(row.get("date")),
        category=_enum(MemoCategory, row.get("category"), MemoCategory.OTHER),
    )


def record_to_row(record: Union[Member, PastoralRecord]) -> Dict[str, Any]:
    """
    Convert a record back to a snake_case store row.

    Empty follow-up fields are written as None so the store clears them.
    """
    if isinstance(record, Member):
        return {
            "id": record.id,
            "name": record.name,
            "group": record.group,
            "role": record.role,
            "phone": record.phone,
            "note": record.note,
        }
    if isinstance(record, VisitRecord):
        return {
            "id": record.id,
            "member_id": record.member_id,
            "type": record.type.value,
            "date": record.date,
            "time": record.time,
            "location": record.location,
            "status": record.status.value,
            "summary": record.summary,
            "prayer_note": record.prayer_note,
            "follow_up_date": record.follow_up_date or None,
            "follow_up_note": record.follow_up_note or None,
            "follow_up_done": record.follow_up_done,
        }
    if isinstance(record, CounselingRecord):
        return {
            "id": record.id,
            "member_id": record.member_id,
            "type": record.type.value,
            "date": record.date,
            "summary": record.summary,
            "confidential": record.confidential,
            "follow_up_date": record.follow_up_date or None,
            "follow_up_note": record.follow_up_note or None,
            "follow_up_done": record.follow_up_done,
        }
    if isinstance(record, PrayerRecord):
        return {
            "id": record.id,
            "member_id": record.member_id,
            "text": record.text,
            "date": record.date,
            "category": record.category.value,
            "status": record.status.value,
        }
    if isinstance(record, MemoRecord):
        return {
            "id": record.id,
            "member_id": record.member_id,
            "text": record.text,
            "date": record.date,
            "category": record.category.value,
        }
    raise TypeError(f"Cannot convert {type(record).__name__} to a row")


def _rows(data: Dict[str, Any], collection: str) -> List[Dict[str, Any]]:
    """Rows of one collection, skipping anything that is not a mapping."""
    rows = data.get(collection)
    if rows is None:
        return []
    if not isinstance(rows, (list, tuple)):
        logger.warning(f"Collection {collection} is {type(rows).__name__}, not a list; skipped")
        return []

    valid = [row for row in rows if isinstance(row, dict)]
    if len(valid) != len(rows):
        logger.warning(f"Skipped {len(rows) - len(valid)} malformed {collection} rows")
    return valid


@dataclass(frozen=True)
class PastoralSnapshot:
    """Immutable view of every pastoral record collection."""
    members: Tuple[Member, ...] = ()
    visits: Tuple[VisitRecord, ...] = ()
    counsels: Tuple[CounselingRecord, ...] = ()
    prayers: Tuple[PrayerRecord, ...] = ()
    memos: Tuple[MemoRecord, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "PastoralSnapshot":
        """
        Build a snapshot from raw store rows.

        Missing collections are empty. A payload that is not a mapping yields
        an empty snapshot, and rows that are not mappings are skipped.
        """
        if not isinstance(data, dict):
            logger.warning(f"Snapshot payload is {type(data).__name__}, not a mapping; starting empty")
            return cls()
        return cls(
            members=tuple(member_from_row(r) for r in _rows(data, "members")),
            visits=tuple(visit_from_row(r) for r in _rows(data, "visits")),
            counsels=tuple(counsel_from_row(r) for r in _rows(data, "counsels")),
            prayers=tuple(prayer_from_row(r) for r in _rows(data, "prayers")),
            memos=tuple(memo_from_row(r) for r in _rows(data, "memos")),
        )

    def to_dict(self) -> Dict[str, list]:
        return {
            "members": [record_to_row(m) for m in self.members],
            "visits": [record_to_row(v) for v in self.visits],
            "counsels": [record_to_row(c) for c in self.counsels],
            "prayers": [record_to_row(p) for p in self.prayers],
            "memos": [record_to_row(m) for m in self.memos],
        }

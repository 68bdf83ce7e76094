"""
In-memory record store for pastoral care collections.
Holds the current immutable snapshot, applies read-modify-write edits and
hands the mutated collection to an optional persist hook (remote sync is
owned by the caller).
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple
from loguru import logger

from ..core.config import get_settings
from ..core.dates import normalize_date
from .records import Member, PastoralSnapshot, RecordKind


PersistHook = Callable[[RecordKind, PastoralSnapshot], None]

FOLLOW_UP_KINDS = (RecordKind.VISIT, RecordKind.COUNSEL)


class MemberDirectory:
    """Resolves member ids, tolerating members deleted after their records."""

    def __init__(self, members: Tuple[Member, ...], placeholder_name: Optional[str] = None):
        self._members: Dict[str, Member] = {m.id: m for m in members}
        if placeholder_name is None:
            placeholder_name = get_settings().deleted_member_label
        self.placeholder_name = placeholder_name

    def __contains__(self, member_id: str) -> bool:
        return member_id in self._members

    def resolve(self, member_id: str) -> Member:
        """Return the member, or a placeholder member if the id is unknown."""
        member = self._members.get(member_id)
        if member is None:
            return Member(id=member_id, name=self.placeholder_name)
        return member

    def name_of(self, member_id: str) -> str:
        return self.resolve(member_id).name


class RecordStore:
    """Owns the current snapshot and serializes edits to it."""

    def __init__(self, snapshot: Optional[PastoralSnapshot] = None,
                 persist: Optional[PersistHook] = None,
                 placeholder_name: Optional[str] = None):
        """Initialize the store with an optional snapshot and persist hook."""
        self._snapshot = snapshot or PastoralSnapshot()
        self._persist = persist
        if placeholder_name is None:
            placeholder_name = get_settings().deleted_member_label
        self.placeholder_name = placeholder_name

    @property
    def snapshot(self) -> PastoralSnapshot:
        return self._snapshot

    def directory(self) -> MemberDirectory:
        return MemberDirectory(self._snapshot.members, self.placeholder_name)

    def replace_snapshot(self, snapshot: PastoralSnapshot) -> None:
        """Swap in a freshly loaded snapshot without persisting."""
        self._snapshot = snapshot
        logger.debug(
            f"Loaded snapshot: {len(snapshot.visits)} visits, "
            f"{len(snapshot.counsels)} counsels"
        )

    def update_record(self, kind: RecordKind, ref_id: str,
                      change: Callable[[object], object]) -> bool:
        """
        Apply a change to the single visit or counsel record with ref_id.

        Args:
            kind: RecordKind.VISIT or RecordKind.COUNSEL
            ref_id: ID of the source record
            change: Function returning the replacement record

        Returns:
            True if a record was changed, False if none matched
        """
        if kind not in FOLLOW_UP_KINDS:
            raise ValueError(f"Records of kind {kind.value} carry no follow-up")
        if kind == RecordKind.VISIT:
            collection = self._snapshot.visits
        else:
            collection = self._snapshot.counsels

        matched = False
        updated = []
        for record in collection:
            if not matched and record.id == ref_id:
                record = change(record)
                matched = True
            updated.append(record)

        if not matched:
            logger.warning(f"No {kind.value} record with id {ref_id}; nothing changed")
            return False

        if kind == RecordKind.VISIT:
            self._snapshot = replace(self._snapshot, visits=tuple(updated))
        else:
            self._snapshot = replace(self._snapshot, counsels=tuple(updated))

        self._save(kind)
        return True

    def set_follow_up(self, kind: RecordKind, ref_id: str,
                      follow_up_date: str, note: Optional[str] = None) -> bool:
        """
        Set or clear a record's follow-up date.

        Setting a date makes an obligation appear; clearing it ("") removes it.
        The done flag is left untouched.
        """
        canonical = normalize_date(follow_up_date)

        def change(record):
            if note is None:
                return replace(record, follow_up_date=canonical)
            return replace(record, follow_up_date=canonical, follow_up_note=note)

        return self.update_record(kind, ref_id, change)

    def _save(self, kind: RecordKind) -> None:
        if self._persist is None:
            return
        try:
            self._persist(kind, self._snapshot)
            logger.info(f"Persisted {kind.value} collection")
        except Exception as e:
            logger.error(f"Error persisting {kind.value} collection: {e}")


class JsonSnapshotFile:
    """Local JSON file holding a snapshot; usable as a persist hook."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> PastoralSnapshot:
        """Load the snapshot, returning an empty one if the file is missing or unreadable."""
        if not self.path.exists():
            logger.warning(f"Snapshot file {self.path} not found, starting empty")
            return PastoralSnapshot()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return PastoralSnapshot.from_dict(data)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading snapshot file {self.path}: {e}")
            return PastoralSnapshot()

    def save(self, snapshot: PastoralSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)

    def __call__(self, kind: RecordKind, snapshot: PastoralSnapshot) -> None:
        self.save(snapshot)

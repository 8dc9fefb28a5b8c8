from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import Scope
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Record store for both scopes.

    Writes are upserts keyed on `record_id`, so repeating a save is harmless.
    Overlapping saves for the same group are not serialized here.
    """

    def list_records(self, scope: Scope) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def save_records(self, scope: Scope, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError

    def delete_records(self, scope: Scope, record_ids: Sequence[str]) -> int:
        raise NotImplementedError

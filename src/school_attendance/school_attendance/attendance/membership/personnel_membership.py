from __future__ import annotations

from typing import Optional, Sequence

from ...core.constants import ALL_PERSONNEL_LABEL
from ...core.enums import AttendanceStatus, Scope
from ...people.model import Personnel
from .base import MembershipStrategy


class PersonnelMembership(MembershipStrategy):
    """All personnel share one fixed bucket."""

    scope = Scope.PERSONNEL
    allowed_statuses = tuple(AttendanceStatus)

    def __init__(self, personnel: Sequence[Personnel]):
        self._personnel = list(personnel)

    def resolve(self, subject_id: str) -> str:
        return ALL_PERSONNEL_LABEL

    def roster(self, group_label: Optional[str]) -> Sequence[Personnel]:
        return list(self._personnel)

    def labels(self) -> list[str]:
        return [ALL_PERSONNEL_LABEL]

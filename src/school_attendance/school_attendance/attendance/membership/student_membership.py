from __future__ import annotations

from typing import Optional, Sequence

from ...core.constants import UNSPECIFIED_CLASS_LABEL
from ...core.enums import AttendanceStatus, Scope
from ...people.model import Student
from .base import MembershipStrategy


class StudentClassMembership(MembershipStrategy):
    """Students are grouped by their current classroom."""

    scope = Scope.STUDENT
    allowed_statuses = (
        AttendanceStatus.PRESENT,
        AttendanceStatus.SICK,
        AttendanceStatus.LEAVE,
        AttendanceStatus.ABSENT,
        AttendanceStatus.HOME,
    )

    def __init__(self, students: Sequence[Student]):
        self._students = list(students)
        self._class_by_id = {s.subject_id: s.student_class for s in self._students}

    def resolve(self, subject_id: str) -> str:
        return self._class_by_id.get(str(subject_id), UNSPECIFIED_CLASS_LABEL)

    def roster(self, group_label: Optional[str]) -> Sequence[Student]:
        if not group_label:
            return []
        return [s for s in self._students if s.student_class == group_label]

    def labels(self) -> list[str]:
        return sorted({s.student_class for s in self._students})

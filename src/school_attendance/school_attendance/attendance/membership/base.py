from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...core.enums import AttendanceStatus, Scope
from ...people.model import Person


class MembershipStrategy(ABC):
    """Strategy Pattern: how a scope maps subjects to group labels and back.

    Labels are resolved against the *current* roster, so a student who has
    changed class is grouped under the new class for old records too.
    """

    scope: Scope
    allowed_statuses: tuple[AttendanceStatus, ...]

    @abstractmethod
    def resolve(self, subject_id: str) -> str:
        """Group label for a subject; never raises for unknown subjects."""
        raise NotImplementedError

    @abstractmethod
    def roster(self, group_label: Optional[str]) -> Sequence[Person]:
        """Current members of a group label."""
        raise NotImplementedError

    @abstractmethod
    def labels(self) -> list[str]:
        raise NotImplementedError

    def allows(self, status: AttendanceStatus) -> bool:
        return status in self.allowed_statuses

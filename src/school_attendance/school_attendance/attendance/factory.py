from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..core.enums import Scope
from ..people.model import Personnel, Student
from .membership.base import MembershipStrategy
from .membership.personnel_membership import PersonnelMembership
from .membership.student_membership import StudentClassMembership


@dataclass
class MembershipFactory:
    """Factory Pattern: choose the membership strategy for a scope."""

    def for_scope(
        self,
        scope: Scope,
        *,
        students: Sequence[Student] = (),
        personnel: Sequence[Personnel] = (),
    ) -> MembershipStrategy:
        if scope == Scope.PERSONNEL:
            return PersonnelMembership(personnel)
        return StudentClassMembership(students)

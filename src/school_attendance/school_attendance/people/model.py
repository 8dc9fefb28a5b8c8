from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and the classroom they are currently assigned to."""

    student_id: int
    title: str
    name: str
    student_class: str
    nickname: str = ""
    dormitory: str = ""

    @property
    def subject_id(self) -> str:
        return str(self.student_id)

    @property
    def display_name(self) -> str:
        return f"{self.title}{self.name}"


@dataclass(frozen=True)
class Personnel:
    """Domain entity: a staff member. All personnel share one attendance bucket."""

    personnel_id: int
    title: str
    name: str
    position: str = ""

    @property
    def subject_id(self) -> str:
        return str(self.personnel_id)

    @property
    def display_name(self) -> str:
        return f"{self.title}{self.name}"


Person = Union[Student, Personnel]

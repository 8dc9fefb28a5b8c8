from __future__ import annotations

from typing import Protocol, Sequence

from .model import Personnel, Student


class PeopleRepository(Protocol):
    """Read access to the current student and personnel rosters."""

    def list_students(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_personnel(self) -> Sequence[Personnel]:
        raise NotImplementedError

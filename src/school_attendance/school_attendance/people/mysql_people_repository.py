from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Personnel, Student
from .repository import PeopleRepository


class MySQLPeopleRepository(PeopleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_students(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, student_title, student_name, student_nickname, student_class, dormitory
                FROM students
                ORDER BY student_class, student_id
                """
            )
            return [
                Student(
                    student_id=int(r["student_id"]),
                    title=r.get("student_title") or "",
                    name=r["student_name"],
                    student_class=r.get("student_class") or "",
                    nickname=r.get("student_nickname") or "",
                    dormitory=r.get("dormitory") or "",
                )
                for r in fetchall(cur)
            ]

    def list_personnel(self) -> Sequence[Personnel]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT personnel_id, personnel_title, personnel_name, position
                FROM personnel
                ORDER BY personnel_id
                """
            )
            return [
                Personnel(
                    personnel_id=int(r["personnel_id"]),
                    title=r.get("personnel_title") or "",
                    name=r["personnel_name"],
                    position=r.get("position") or "",
                )
                for r in fetchall(cur)
            ]

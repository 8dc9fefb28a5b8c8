from __future__ import annotations

from typing import Sequence

from ..core.enums import Scope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .model import AttendanceRecord
from .repository import AttendanceRepository

# scope -> (table, subject column)
_TABLES = {
    Scope.STUDENT: ("student_attendance", "student_id"),
    Scope.PERSONNEL: ("personnel_attendance", "personnel_id"),
}


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_records(self, scope: Scope) -> Sequence[AttendanceRecord]:
        table, subject_col = _TABLES[scope]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, att_date, period, {subject_col} AS subject_id, status, note
                FROM {table}
                """
            )
            return [
                AttendanceRecord(
                    record_id=str(r["id"]),
                    date=str(r["att_date"] or ""),
                    period=str(r["period"] or ""),
                    subject_id=str(r["subject_id"]),
                    status=str(r["status"] or ""),
                    note=r.get("note"),
                )
                for r in fetchall(cur)
            ]

    def save_records(self, scope: Scope, records: Sequence[AttendanceRecord]) -> None:
        if not records:
            return
        table, subject_col = _TABLES[scope]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"""
                INSERT INTO {table}(id, att_date, period, {subject_col}, status, note)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    att_date=VALUES(att_date),
                    period=VALUES(period),
                    {subject_col}=VALUES({subject_col}),
                    status=VALUES(status),
                    note=VALUES(note)
                """,
                [(r.record_id, r.date, r.period, r.subject_id, r.status, r.note) for r in records],
            )

    def delete_records(self, scope: Scope, record_ids: Sequence[str]) -> int:
        ids = list(dict.fromkeys(record_ids))
        if not ids:
            return 0
        table, _ = _TABLES[scope]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {table} WHERE id IN ({placeholders(ids)})", tuple(ids))
            return int(cur.rowcount or 0)

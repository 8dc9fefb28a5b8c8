from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, Sequence

from ..common.datetime_utils import current_buddhist_date
from ..core.enums import AttendanceStatus, Scope
from .aggregation import period_label
from .model import AttendanceGroup, PeriodConfig

GROUP_COLUMN_LABEL = {
    Scope.STUDENT: "ชั้นเรียน",
    Scope.PERSONNEL: "ฝ่าย",
}


def export_headers(scope: Scope) -> list[str]:
    return ["วันที่", "ช่วงเวลา", GROUP_COLUMN_LABEL[scope], "ทั้งหมด", "มา", "ป่วย/ลา", "ขาด", "อยู่บ้าน"]


def export_row(group: AttendanceGroup, periods: Sequence[PeriodConfig]) -> list:
    return [
        group.date,
        period_label(periods, group.period),
        group.group_label,
        group.total,
        group.present_total,
        group.sick_leave_total,
        group.count(AttendanceStatus.ABSENT),
        group.count(AttendanceStatus.HOME),
    ]


def write_groups_csv(groups: Iterable[AttendanceGroup], *, scope: Scope, periods: Sequence[PeriodConfig]) -> bytes:
    """CSV bytes with a UTF-8 BOM; every field quoted, embedded quotes doubled."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(export_headers(scope))
    for g in groups:
        writer.writerow(export_row(g, periods))
    return out.getvalue().encode("utf-8-sig")


def export_filename(now: datetime | None = None) -> str:
    return f"attendance_report_{current_buddhist_date(now).replace('/', '-')}.csv"

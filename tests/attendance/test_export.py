import csv
import io
from datetime import datetime

from src.school_attendance.school_attendance.attendance.aggregation import default_periods
from src.school_attendance.school_attendance.attendance.export import export_filename, write_groups_csv
from src.school_attendance.school_attendance.attendance.model import AttendanceGroup
from src.school_attendance.school_attendance.core.enums import Scope


def make_group(label='ม.6/1 "A"'):
    counts = {"present": 3, "activity": 1, "sick": 1, "leave": 2, "absent": 1, "home": 1}
    return AttendanceGroup(
        key=f"01/06/2567-p1-{label}",
        date="01/06/2567",
        period="p1",
        group_label=label,
        counts=counts,
        total=9,
        record_ids=tuple(str(i) for i in range(9)),
    )


def test_csv_has_bom_and_quotes_every_field():
    content = write_groups_csv([make_group()], scope=Scope.STUDENT, periods=default_periods())

    assert content.startswith(b"\xef\xbb\xbf")
    text = content.decode("utf-8-sig")
    lines = text.split("\r\n")
    assert lines[0] == '"วันที่","ช่วงเวลา","ชั้นเรียน","ทั้งหมด","มา","ป่วย/ลา","ขาด","อยู่บ้าน"'
    assert lines[1] == '"01/06/2567","ชั่วโมงที่ 1","ม.6/1 ""A""","9","4","3","1","1"'


def test_csv_rows_parse_back():
    content = write_groups_csv([make_group("บุคลากรทั้งหมด")], scope=Scope.PERSONNEL, periods=default_periods())

    rows = list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))

    assert rows[0][2] == "ฝ่าย"
    assert rows[1] == ["01/06/2567", "ชั่วโมงที่ 1", "บุคลากรทั้งหมด", "9", "4", "3", "1", "1"]


def test_export_filename_uses_buddhist_date():
    assert export_filename(datetime(2026, 10, 18)) == "attendance_report_18-10-2569.csv"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus, NutritionTargetGroup, Scope

# (id, label, enabled)
DEFAULT_ATTENDANCE_PERIODS = (
    ("morning_act", "กิจกรรมเช้า", True),
    ("p1", "ชั่วโมงที่ 1", True),
    ("p2", "ชั่วโมงที่ 2", True),
    ("p3", "ชั่วโมงที่ 3", True),
    ("lunch_act", "กิจกรรมเที่ยง", True),
    ("p4", "ชั่วโมงที่ 4", True),
    ("p5", "ชั่วโมงที่ 5", True),
    ("p6", "ชั่วโมงที่ 6", True),
    ("evening_act", "กิจกรรมเย็น", True),
)

DEFAULT_PERIOD_ID = "morning_act"

UNSPECIFIED_CLASS_LABEL = "ไม่ระบุชั้นเรียน"
ALL_PERSONNEL_LABEL = "บุคลากรทั้งหมด"

# Unsaved roster members are displayed with this status. Never persisted implicitly.
DEFAULT_STATUS = AttendanceStatus.PRESENT

RECORD_ID_PREFIX = {
    Scope.STUDENT: "sa",
    Scope.PERSONNEL: "pa",
}

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "มา",
    AttendanceStatus.SICK: "ป่วย",
    AttendanceStatus.LEAVE: "ลา",
    AttendanceStatus.ABSENT: "ขาด",
    AttendanceStatus.HOME: "อยู่บ้าน",
    AttendanceStatus.ACTIVITY: "กิจกรรม",
}

DEFAULT_STUDENT_COUNT = 100

NUTRITION_STANDARDS = {
    NutritionTargetGroup.KINDERGARTEN: {"calories": 1200, "protein": 35, "fat": 40, "carbs": 175},
    NutritionTargetGroup.PRIMARY: {"calories": 1600, "protein": 45, "fat": 53, "carbs": 230},
    NutritionTargetGroup.SECONDARY: {"calories": 2100, "protein": 60, "fat": 70, "carbs": 300},
}

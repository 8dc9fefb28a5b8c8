from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .attendance.factory import MembershipFactory
from .attendance.model import PeriodConfig
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .nutrition.mysql_nutrition_repository import MySQLNutritionRepository
from .nutrition.service import NutritionService
from .people.mysql_people_repository import MySQLPeopleRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    people_repo: MySQLPeopleRepository
    attendance_repo: MySQLAttendanceRepository
    nutrition_repo: MySQLNutritionRepository

    attendance_service: AttendanceService
    nutrition_service: NutritionService


def parse_periods(raw: Optional[Sequence]) -> Optional[list[PeriodConfig]]:
    """Settings hold periods as (id, label, enabled) tuples or dicts."""
    if not raw:
        return None
    periods = []
    for item in raw:
        if isinstance(item, dict):
            periods.append(
                PeriodConfig(
                    period_id=str(item["id"]),
                    label=str(item.get("label") or item["id"]),
                    enabled=bool(item.get("enabled", True)),
                )
            )
        else:
            period_id, label, enabled = item
            periods.append(PeriodConfig(period_id=str(period_id), label=str(label), enabled=bool(enabled)))
    return periods


def build_container(*, db_config: dict, attendance_periods: Optional[Sequence] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    people_repo = MySQLPeopleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    nutrition_repo = MySQLNutritionRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        people_repo,
        periods=parse_periods(attendance_periods),
        membership_factory=MembershipFactory(),
    )
    nutrition_service = NutritionService(nutrition_repo, people_repo)

    return Container(
        conn=conn,
        people_repo=people_repo,
        attendance_repo=attendance_repo,
        nutrition_repo=nutrition_repo,
        attendance_service=attendance_service,
        nutrition_service=nutrition_service,
    )

"""Example: use the service layer directly, without Flask."""

import importlib

from config import get_settings_module

from src.school_attendance.school_attendance.attendance.model import ViewState
from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.enums import Scope


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    view_state = ViewState.initial(Scope.STUDENT)
    for group in container.attendance_service.history(view_state)[:5]:
        print(group.key, group.total, group.present_total)


if __name__ == "__main__":
    main()

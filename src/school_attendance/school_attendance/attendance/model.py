from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import current_buddhist_date
from ..core.constants import DEFAULT_PERIOD_ID
from ..core.enums import AttendanceStatus, Scope
from ..core.exceptions import ValidationError
from ..people.model import Person


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's status for one date and period.

    `status` is kept as the raw stored string so values outside
    AttendanceStatus survive a read and are only skipped when counting.
    """

    record_id: str
    date: str
    period: str
    subject_id: str
    status: str
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "date": self.date,
            "period": self.period,
            "subject_id": self.subject_id,
            "status": self.status,
            "note": self.note,
        }


@dataclass(frozen=True)
class PeriodConfig:
    period_id: str
    label: str
    enabled: bool = True


@dataclass(frozen=True)
class AttendanceGroup:
    """Read-model: all records sharing date, period and resolved group label."""

    key: str
    date: str
    period: str
    group_label: str
    counts: Mapping[str, int]
    total: int
    record_ids: tuple[str, ...]

    def count(self, status: AttendanceStatus) -> int:
        return int(self.counts.get(status.value, 0))

    @property
    def present_total(self) -> int:
        """Present plus activity, as shown in summaries and exports."""
        return self.count(AttendanceStatus.PRESENT) + self.count(AttendanceStatus.ACTIVITY)

    @property
    def sick_leave_total(self) -> int:
        return self.count(AttendanceStatus.SICK) + self.count(AttendanceStatus.LEAVE)

    def to_dict(self) -> dict:
        data = {
            "key": self.key,
            "date": self.date,
            "period": self.period,
            "group_label": self.group_label,
            "total": self.total,
            "ids": list(self.record_ids),
        }
        data.update({s.value: self.count(s) for s in AttendanceStatus})
        return data


@dataclass(frozen=True)
class ViewState:
    """Serializable selection state of the attendance screens.

    Every attendance operation takes one of these and, where the selection
    changes, returns a new one instead of mutating it.
    """

    scope: Scope
    selected_date: str
    selected_period: str = DEFAULT_PERIOD_ID
    selected_class: Optional[str] = None
    history_search: str = ""
    filter_group: str = ""
    filter_period: str = ""
    selected_groups: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def initial(cls, scope: Scope, *, today: str | None = None) -> "ViewState":
        return cls(scope=scope, selected_date=today or current_buddhist_date())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, today: str | None = None) -> "ViewState":
        try:
            scope = Scope(str(data.get("scope") or Scope.STUDENT.value))
        except ValueError:
            raise ValidationError("ขอบเขตการเช็คชื่อไม่ถูกต้อง")

        selected_groups = data.get("selected_groups") or ()
        if isinstance(selected_groups, str):
            selected_groups = (selected_groups,)
        elif not isinstance(selected_groups, (list, tuple)):
            raise ValidationError("รูปแบบรายการที่เลือกไม่ถูกต้อง")

        return cls(
            scope=scope,
            selected_date=str(data.get("selected_date") or today or current_buddhist_date()),
            selected_period=str(data.get("selected_period") or DEFAULT_PERIOD_ID),
            selected_class=(str(data["selected_class"]) if data.get("selected_class") else None),
            history_search=str(data.get("history_search") or ""),
            filter_group=str(data.get("filter_group") or ""),
            filter_period=str(data.get("filter_period") or ""),
            selected_groups=tuple(str(k) for k in selected_groups),
        )

    def to_dict(self) -> dict:
        return {
            "scope": self.scope.value,
            "selected_date": self.selected_date,
            "selected_period": self.selected_period,
            "selected_class": self.selected_class,
            "history_search": self.history_search,
            "filter_group": self.filter_group,
            "filter_period": self.filter_period,
            "selected_groups": list(self.selected_groups),
        }

    def toggle_group(self, key: str) -> "ViewState":
        if key in self.selected_groups:
            return replace(self, selected_groups=tuple(k for k in self.selected_groups if k != key))
        return replace(self, selected_groups=self.selected_groups + (key,))

    def select_all(self, keys: Sequence[str]) -> "ViewState":
        return replace(self, selected_groups=tuple(dict.fromkeys(keys)))

    def clear_selection(self) -> "ViewState":
        return replace(self, selected_groups=())


@dataclass(frozen=True)
class CheckinSheet:
    view_state: ViewState
    roster: Sequence[Person]
    statuses: Mapping[str, str]


@dataclass(frozen=True)
class EditSession:
    """Pre-populated edit form for one history group."""

    date: str
    period: str
    group_label: str
    roster: Sequence[Person]
    statuses: Mapping[str, str]


@dataclass(frozen=True)
class DailySummary:
    date: str
    present: int
    sick_leave: int
    home: int
    absent: int
    total: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "present": self.present,
            "sick_leave": self.sick_leave,
            "home": self.home,
            "absent": self.absent,
            "total": self.total,
        }

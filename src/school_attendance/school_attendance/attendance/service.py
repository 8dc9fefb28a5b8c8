from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_buddhist_date
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, Scope
from ..core.exceptions import NotFoundError, SaveError, ValidationError
from ..people.repository import PeopleRepository
from .aggregation import daily_summary, enabled_periods, filter_groups, group_records, period_breakdown
from .export import export_filename, write_groups_csv
from .factory import MembershipFactory
from .membership.base import MembershipStrategy
from .model import AttendanceGroup, AttendanceRecord, CheckinSheet, EditSession, PeriodConfig, ViewState
from .reconciliation import build_records, default_fill, reconcile_group, stored_statuses
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in sessions, grouped history, group edits and exports.

    Every call reloads rosters and records from the repositories and
    recomputes groups from scratch; nothing is cached between calls.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        people: PeopleRepository,
        *,
        periods: Optional[Sequence[PeriodConfig]] = None,
        membership_factory: MembershipFactory | None = None,
    ):
        self._attendance = attendance
        self._people = people
        self._periods = enabled_periods(periods)
        self._factory = membership_factory or MembershipFactory()

    @property
    def periods(self) -> list[PeriodConfig]:
        return list(self._periods)

    def _membership(self, scope: Scope) -> MembershipStrategy:
        if scope == Scope.PERSONNEL:
            return self._factory.for_scope(scope, personnel=self._people.list_personnel())
        return self._factory.for_scope(scope, students=self._people.list_students())

    def _group_all(self, scope: Scope, membership: MembershipStrategy) -> list[AttendanceGroup]:
        records = self._attendance.list_records(scope)
        return group_records(records, membership.resolve, [p.period_id for p in self._periods])

    def class_options(self) -> list[str]:
        return self._membership(Scope.STUDENT).labels()

    def allowed_statuses(self, scope: Scope) -> tuple[AttendanceStatus, ...]:
        return self._factory.for_scope(scope).allowed_statuses

    # ----- history -----

    def grouped_history(self, scope: Scope) -> list[AttendanceGroup]:
        return self._group_all(scope, self._membership(scope))

    def history(self, view_state: ViewState) -> list[AttendanceGroup]:
        return filter_groups(
            self.grouped_history(view_state.scope),
            search=view_state.history_search,
            group_label=view_state.filter_group,
            period=view_state.filter_period,
        )

    def select_all_filtered(self, view_state: ViewState) -> ViewState:
        return view_state.select_all([g.key for g in self.history(view_state)])

    def daily_stats(self, scope: Scope, date: str) -> dict:
        groups = self.grouped_history(scope)
        return {
            "summary": daily_summary(groups, date).to_dict(),
            "periods": period_breakdown(groups, date, self._periods),
        }

    # ----- check-in -----

    def checkin_sheet(self, view_state: ViewState) -> CheckinSheet:
        """Roster of the current selection with default-filled statuses."""
        membership = self._membership(view_state.scope)
        roster = membership.roster(view_state.selected_class)
        if not roster:
            return CheckinSheet(view_state=view_state, roster=[], statuses={})
        records = self._attendance.list_records(view_state.scope)
        statuses = default_fill(roster, records, view_state.selected_date, view_state.selected_period)
        return CheckinSheet(view_state=view_state, roster=roster, statuses=statuses)

    def save_session(self, view_state: ViewState, statuses: Mapping[str, str]) -> list[AttendanceRecord]:
        membership = self._membership(view_state.scope)
        roster = membership.roster(view_state.selected_class)
        return self._save(
            membership,
            roster,
            statuses,
            date=view_state.selected_date,
            period=view_state.selected_period,
        )

    # ----- group edit -----

    def _find_group(self, scope: Scope, key: str) -> tuple[MembershipStrategy, AttendanceGroup]:
        membership = self._membership(scope)
        for g in self._group_all(scope, membership):
            if g.key == key:
                return membership, g
        raise NotFoundError("ไม่พบรายการเช็คชื่อที่เลือก")

    def open_group_for_edit(self, scope: Scope, key: str) -> EditSession:
        membership, group = self._find_group(scope, key)
        roster = membership.roster(group.group_label)
        records = self._attendance.list_records(scope)
        statuses = reconcile_group(group.date, group.period, roster, records)
        return EditSession(
            date=group.date,
            period=group.period,
            group_label=group.group_label,
            roster=roster,
            statuses=statuses,
        )

    def save_group_edit(
        self,
        scope: Scope,
        *,
        date: str,
        period: str,
        group_label: str,
        statuses: Mapping[str, str],
    ) -> list[AttendanceRecord]:
        """Overwrite every current member's record for the group's date and period."""
        membership = self._membership(scope)
        return self._save(membership, membership.roster(group_label), statuses, date=date, period=period)

    def delete_groups(self, scope: Scope, keys: Sequence[str]) -> int:
        if not keys:
            raise ValidationError("กรุณาเลือกรายการที่ต้องการลบ")
        wanted = set(keys)
        ids: list[str] = []
        for g in self.grouped_history(scope):
            if g.key in wanted:
                ids.extend(g.record_ids)
        if not ids:
            raise NotFoundError("ไม่พบรายการเช็คชื่อที่เลือก")
        try:
            deleted = self._attendance.delete_records(scope, ids)
        except Exception as e:
            logger.exception("Deleting %d %s attendance records failed", len(ids), scope.value)
            raise SaveError("เกิดข้อผิดพลาดในการเชื่อมต่อเซิร์ฟเวอร์ กรุณาลองใหม่อีกครั้ง") from e
        logger.info("Deleted %d %s attendance records from %d groups", deleted, scope.value, len(wanted))
        return deleted

    # ----- export -----

    def export_csv(self, view_state: ViewState, *, now: datetime | None = None) -> tuple[str, bytes]:
        if not view_state.selected_groups:
            raise ValidationError("กรุณาเลือกรายการที่ต้องการส่งออก")
        selected = set(view_state.selected_groups)
        groups = [g for g in self.grouped_history(view_state.scope) if g.key in selected]
        content = write_groups_csv(groups, scope=view_state.scope, periods=self._periods)
        return export_filename(now), content

    # ----- internals -----

    def _validate_statuses(
        self,
        membership: MembershipStrategy,
        statuses: Mapping[str, str],
        stored: Mapping[str, str],
    ) -> None:
        """Reject unknown or disallowed statuses unless the member already has that value stored."""
        for subject_id, raw in statuses.items():
            if stored.get(subject_id) == raw:
                continue
            status = AttendanceStatus.parse(raw)
            if status is None or not membership.allows(status):
                raise ValidationError(f"สถานะ '{raw}' ไม่ถูกต้องสำหรับรหัส {subject_id}")

    def _save(
        self,
        membership: MembershipStrategy,
        roster: Sequence,
        statuses: Mapping[str, str],
        *,
        date: str,
        period: str,
    ) -> list[AttendanceRecord]:
        if parse_buddhist_date(date) is None:
            raise ValidationError("วันที่ไม่ถูกต้อง (DD/MM/YYYY)")
        period = require_non_empty(period, "ช่วงเวลา")
        if not roster:
            return []

        member_ids = {p.subject_id for p in roster}
        relevant = {str(k): v for k, v in statuses.items() if str(k) in member_ids}
        stored = stored_statuses(self._attendance.list_records(membership.scope), date, period)
        self._validate_statuses(membership, relevant, stored)

        records = build_records(membership.scope, roster, relevant, date, period)
        try:
            self._attendance.save_records(membership.scope, records)
        except Exception as e:
            logger.exception("Saving %d %s attendance records for %s %s failed", len(records), membership.scope.value, date, period)
            raise SaveError("เกิดข้อผิดพลาดในการเชื่อมต่อเซิร์ฟเวอร์ กรุณาลองใหม่อีกครั้ง") from e
        logger.info("Saved %d %s attendance records for %s %s", len(records), membership.scope.value, date, period)
        return records

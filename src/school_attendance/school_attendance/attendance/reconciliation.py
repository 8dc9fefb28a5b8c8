"""Mapping between stored records and the per-member status maps used by forms.

A member with no stored record shows as DEFAULT_STATUS (present). That
default lives only in the returned map; nothing is written until the user
saves, so storage keeps "no record" and "explicitly present" apart.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from ..common.datetime_utils import compact_buddhist_date
from ..core.constants import DEFAULT_STATUS, RECORD_ID_PREFIX
from ..core.enums import AttendanceStatus, Scope
from ..people.model import Person
from .model import AttendanceRecord


def status_value(status) -> str:
    if isinstance(status, AttendanceStatus):
        return status.value
    return str(status)


def build_record_id(scope: Scope, subject_id: str, date: str, period: str) -> str:
    """Deterministic id, so re-saving the same (date, period, subject) overwrites."""
    return f"{RECORD_ID_PREFIX[scope]}-{subject_id}-{compact_buddhist_date(date)}-{period}"


def stored_statuses(records: Iterable[AttendanceRecord], date: str, period: str) -> dict[str, str]:
    """Stored status per subject for one (date, period); the first record of a subject wins."""
    found: dict[str, str] = {}
    for r in records:
        if r.date == date and r.period == period:
            found.setdefault(str(r.subject_id), status_value(r.status))
    return found


def default_fill(
    roster: Sequence[Person],
    records: Iterable[AttendanceRecord],
    date: str,
    period: str,
) -> dict[str, str]:
    """Working statuses for a new check-in session on (date, period)."""
    existing = stored_statuses(records, date, period)
    return {p.subject_id: existing.get(p.subject_id, DEFAULT_STATUS.value) for p in roster}


def reconcile_group(
    date: str,
    period: str,
    roster: Sequence[Person],
    records: Iterable[AttendanceRecord],
) -> dict[str, str]:
    """Status map for editing a history group.

    `roster` is the current membership of the group's label. Stored records
    of subjects who are no longer in it are left out of the map; they stay in
    the store but cannot be reached from this group anymore.
    """
    return default_fill(roster, records, date, period)


def mark_all_present(statuses: Mapping[str, str], roster: Sequence[Person]) -> dict[str, str]:
    out = dict(statuses)
    for p in roster:
        out[p.subject_id] = DEFAULT_STATUS.value
    return out


def build_records(
    scope: Scope,
    roster: Sequence[Person],
    statuses: Mapping[str, str],
    date: str,
    period: str,
) -> list[AttendanceRecord]:
    """One record per roster member; members missing from `statuses` are saved as present."""
    return [
        AttendanceRecord(
            record_id=build_record_id(scope, p.subject_id, date, period),
            date=date,
            period=period,
            subject_id=p.subject_id,
            status=status_value(statuses.get(p.subject_id) or DEFAULT_STATUS),
        )
        for p in roster
    ]

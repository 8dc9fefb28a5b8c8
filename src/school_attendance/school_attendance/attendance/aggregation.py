"""Grouping and filtering of attendance history.

All functions here are pure: they read the sequences they are given and
return new objects. Callers recompute whenever records, rosters or period
configuration change.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import buddhist_sort_key
from ..core.constants import DEFAULT_ATTENDANCE_PERIODS
from ..core.enums import AttendanceStatus
from .model import AttendanceGroup, AttendanceRecord, DailySummary, PeriodConfig


def default_periods() -> list[PeriodConfig]:
    return [PeriodConfig(period_id=p, label=label, enabled=enabled) for p, label, enabled in DEFAULT_ATTENDANCE_PERIODS]


def enabled_periods(configured: Optional[Sequence[PeriodConfig]] = None) -> list[PeriodConfig]:
    """Enabled periods of the configured table, or the defaults if none are enabled."""
    periods = [p for p in (configured or default_periods()) if p.enabled]
    return periods or default_periods()


def period_label(periods: Sequence[PeriodConfig], period_id: str) -> str:
    for p in periods:
        if p.period_id == period_id:
            return p.label
    return period_id


def group_key(date: str, period: str, group_label: str) -> str:
    return f"{date}-{period}-{group_label}"


def group_records(
    records: Iterable[AttendanceRecord],
    resolve: Callable[[str], str],
    period_order: Sequence[str],
) -> list[AttendanceGroup]:
    """Aggregate records into one summary per (date, period, group label).

    Ordering is newest date first, then later period first by position in
    `period_order`. Periods missing from `period_order` rank as -1.
    Statuses outside AttendanceStatus add to `total` but to no counter.
    """
    buckets: dict[str, dict] = {}

    for r in records:
        label = resolve(r.subject_id)
        key = group_key(r.date, r.period, label)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {
                "date": r.date,
                "period": r.period,
                "group_label": label,
                "counts": {s.value: 0 for s in AttendanceStatus},
                "total": 0,
                "ids": [],
            }
            buckets[key] = bucket

        bucket["total"] += 1
        bucket["ids"].append(r.record_id)
        status = AttendanceStatus.parse(r.status)
        if status is not None:
            bucket["counts"][status.value] += 1

    order = {period_id: idx for idx, period_id in enumerate(period_order)}

    groups = [
        AttendanceGroup(
            key=key,
            date=b["date"],
            period=b["period"],
            group_label=b["group_label"],
            counts=b["counts"],
            total=b["total"],
            record_ids=tuple(b["ids"]),
        )
        for key, b in buckets.items()
    ]
    # sorted() is stable with reverse=True, so ties keep first-seen order.
    groups.sort(key=lambda g: (buddhist_sort_key(g.date), order.get(g.period, -1)), reverse=True)
    return groups


def filter_groups(
    groups: Iterable[AttendanceGroup],
    *,
    search: str = "",
    group_label: str = "",
    period: str = "",
) -> list[AttendanceGroup]:
    """AND of all non-empty criteria; `search` matches date or label, case-insensitively."""
    needle = (search or "").strip().lower()
    out = []
    for g in groups:
        if needle and needle not in g.group_label.lower() and needle not in g.date.lower():
            continue
        if group_label and g.group_label != group_label:
            continue
        if period and g.period != period:
            continue
        out.append(g)
    return out


def daily_summary(groups: Iterable[AttendanceGroup], date: str) -> DailySummary:
    present = sick_leave = home = absent = total = 0
    for g in groups:
        if g.date != date:
            continue
        present += g.present_total
        sick_leave += g.sick_leave_total
        home += g.count(AttendanceStatus.HOME)
        absent += g.count(AttendanceStatus.ABSENT)
        total += g.total
    return DailySummary(date=date, present=present, sick_leave=sick_leave, home=home, absent=absent, total=total)


def period_breakdown(groups: Iterable[AttendanceGroup], date: str, periods: Sequence[PeriodConfig]) -> list[dict]:
    """Per-period status counts for one date, one row per period in `periods`."""
    rows = {
        p.period_id: {"period": p.period_id, "label": p.label, "total": 0, **{s.value: 0 for s in AttendanceStatus}}
        for p in periods
    }
    for g in groups:
        row = rows.get(g.period)
        if g.date != date or row is None:
            continue
        row["total"] += g.total
        for s in AttendanceStatus:
            row[s.value] += g.count(s)
    return list(rows.values())

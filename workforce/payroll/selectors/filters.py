# -*- coding: utf-8 -*-
"""
Typed filters for list queries.

Raw query params (strings, lists, missing keys) are normalised here by pure
functions into frozen dataclasses; repositories only ever see the dataclass.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Tuple

from payroll.exceptions import InvalidDate
from payroll.models import SalaryCycle

MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


@dataclass(frozen=True)
class RecordFilter:
    """Filter for attendance / advance / expense lists."""
    worker_id: Optional[int] = None
    date: Optional[date] = None
    month: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def date_bounds(self) -> Tuple[Optional[date], Optional[date]]:
        """
        Resolve to an inclusive (lower, upper) pair.
        Exact ``date`` wins, then explicit start/end, then ``month``.
        """
        if self.date:
            return self.date, self.date
        if self.start_date or self.end_date:
            return self.start_date, self.end_date
        if self.month:
            return month_range(self.month)
        return None, None


@dataclass(frozen=True)
class SalaryFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None


# ==== helpers ====
def _first(v: Any) -> Any:
    if isinstance(v, (list, tuple)):
        return v[0] if v else None
    return v


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def parse_date(v: Any, field: str = "date") -> Optional[date]:
    v = _first(v)
    if _blank(v):
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return datetime.strptime(str(v).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"{field} must be a date in YYYY-MM-DD format", field=field, value=v)


def parse_month(v: Any) -> Optional[str]:
    v = _first(v)
    if _blank(v):
        return None
    s = str(v).strip()
    if not MONTH_RE.match(s):
        raise InvalidDate("month must be in YYYY-MM format", field="month", value=v)
    return s


def month_range(month: str) -> Tuple[date, date]:
    year, mon = (int(x) for x in month.split("-"))
    first = date(year, mon, 1)
    nxt = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
    return first, nxt - timedelta(days=1)


def _to_int(v: Any) -> Optional[int]:
    v = _first(v)
    if _blank(v):
        return None
    try:
        return int(str(v).strip())
    except ValueError:
        return None


# ==== builders ====
def build_record_filter(params: Optional[Mapping[str, Any]] = None) -> RecordFilter:
    params = params or {}
    return RecordFilter(
        worker_id=_to_int(params.get("worker_id")),
        date=parse_date(params.get("date"), "date"),
        month=parse_month(params.get("month")),
        start_date=parse_date(params.get("start_date"), "start_date"),
        end_date=parse_date(params.get("end_date"), "end_date"),
    )


def build_salary_filter(params: Optional[Mapping[str, Any]] = None) -> SalaryFilter:
    params = params or {}
    status = _first(params.get("status"))
    status = str(status).strip().upper() if not _blank(status) else None
    if status and status not in SalaryCycle.Status.values:
        status = None
    return SalaryFilter(
        start_date=parse_date(params.get("start_date"), "start_date"),
        end_date=parse_date(params.get("end_date"), "end_date"),
        status=status,
    )

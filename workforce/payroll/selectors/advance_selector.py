# -*- coding: utf-8 -*-
"""
Read-side advance reports:
- per-worker total over an optional date range
- every worker with their most recent advance
"""
from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from django.db.models import QuerySet

from payroll.exceptions import InvalidDate, NotFound
from payroll.models import Worker
from payroll.repositories import advance_repository, worker_repository
from payroll.selectors.filters import parse_date
from payroll.services.pay_calculator import ZERO, money


def worker_advance_total(worker_id: int, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    params = params or {}
    if worker_repository.get_or_none(worker_id) is None:
        raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)
    start = parse_date(params.get("start_date"), "start_date")
    end = parse_date(params.get("end_date"), "end_date")
    if start and end and end < start:
        raise InvalidDate("end_date cannot be before start_date", start_date=start, end_date=end)
    total = advance_repository.total_for_worker(worker_id, start, end)
    return {
        "worker_id": worker_id,
        "start_date": start,
        "end_date": end,
        "total": money(total) if total is not None else ZERO,
    }

def workers_with_latest_advance() -> QuerySet[Worker]:
    return worker_repository.with_latest_advance()

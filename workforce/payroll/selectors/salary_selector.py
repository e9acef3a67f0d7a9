# -*- coding: utf-8 -*-
"""
Read-side queries for salary cycles:
- normalise raw params into SalaryFilter
- delegate to the repository
"""
from __future__ import annotations
from typing import Any, List, Mapping, Optional

from django.db.models import QuerySet

from payroll.exceptions import NotFound
from payroll.models import SalaryCycle
from payroll.repositories import salary_repository as repo
from payroll.repositories import worker_repository
from payroll.selectors.filters import SalaryFilter, build_salary_filter


def _require_worker(worker_id: int) -> None:
    if worker_repository.get_or_none(worker_id) is None:
        raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)

def get_salary(salary_id: int) -> SalaryCycle:
    obj = repo.base_qs().prefetch_related("payments").filter(id=salary_id).first()
    if obj is None:
        raise NotFound(f"Salary record {salary_id} not found", salary_id=salary_id)
    return obj

def list_worker_salaries(worker_id: int, params: Optional[Mapping[str, Any]] = None,
                         f: Optional[SalaryFilter] = None) -> QuerySet[SalaryCycle]:
    _require_worker(worker_id)
    return repo.list_for_worker(worker_id, f or build_salary_filter(params))

def list_pending_salaries() -> QuerySet[SalaryCycle]:
    return repo.list_pending()

def list_outstanding_salaries(worker_id: int) -> List[SalaryCycle]:
    _require_worker(worker_id)
    return repo.list_outstanding(worker_id)

# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path
from payroll.views.salary_view import (
    LockStatusView,
    PaidPeriodsView,
    PendingSalariesView,
    SalaryCalculateView,
    SalaryCreateView,
    SalaryDetailView,
    SalaryIssueView,
    SalaryPayWorkerView,
    WorkerCarryForwardView,
    WorkerOutstandingView,
    WorkerSalariesView,
)

app_name = "salary"

urlpatterns = [
    path("calculate/<int:worker_id>", SalaryCalculateView.as_view(), name="calculate"),
    path("<int:worker_id>/create", SalaryCreateView.as_view(), name="create"),
    path("<int:salary_id>/issue", SalaryIssueView.as_view(), name="issue"),
    path("paid-periods", PaidPeriodsView.as_view(), name="paid-periods"),
    path("lock", LockStatusView.as_view(), name="lock"),
    path("pending", PendingSalariesView.as_view(), name="pending"),
    path("worker/<int:worker_id>", WorkerSalariesView.as_view(), name="worker-salaries"),
    path("worker/<int:worker_id>/pay", SalaryPayWorkerView.as_view(), name="pay-worker"),
    path("worker/<int:worker_id>/outstanding", WorkerOutstandingView.as_view(), name="outstanding"),
    path("worker/<int:worker_id>/carry-forward", WorkerCarryForwardView.as_view(), name="carry-forward"),
    path("<int:salary_id>", SalaryDetailView.as_view(), name="detail"),
]

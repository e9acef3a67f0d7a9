# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from payroll.exceptions import PayrollError
from payroll.selectors import salary_selector
from payroll.serializers.salary_serializer import (
    AllocationSerializer,
    BreakdownSerializer,
    IssueSalarySerializer,
    LockQuerySerializer,
    PaidPeriodSerializer,
    PayDateQuerySerializer,
    PayWorkerSerializer,
    SalaryCycleDetailSerializer,
    SalaryCycleReadSerializer,
    WorkerIdQuerySerializer,
)
from payroll.services.salary_service import SalaryEngine
from payroll.utils.pagination import DefaultPagination
from payroll.views.utils import PAGE_PARAMS, error_response, path_int, q_date, q_int, q_str, std_errors


class _SalaryAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    def engine(self) -> SalaryEngine:
        return SalaryEngine()

    @staticmethod
    def pay_date(request):
        ser = PayDateQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        return ser.validated_data.get("pay_date")


class SalaryCalculateView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Preview the next salary cycle (no writes)",
        parameters=[path_int("worker_id", "Worker ID"), q_date("pay_date", "Cycle end (default today)")],
        responses={200: BreakdownSerializer, **std_errors()},
    )
    def get(self, request, worker_id: int):
        try:
            bd = self.engine().calculate_breakdown(worker_id, self.pay_date(request), preview=True)
        except PayrollError as e:
            return error_response(e)
        return Response(BreakdownSerializer(bd).data)


class SalaryCreateView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Create the next salary cycle for a worker",
        description="Fails when the pay date is before the next cycle start. "
                    "A negative net pay is stored as 0 and an auto advance is created for the shortfall.",
        parameters=[path_int("worker_id", "Worker ID"), q_date("pay_date", "Cycle end (default today)")],
        request=None,
        responses={201: SalaryCycleReadSerializer, **std_errors()},
    )
    def post(self, request, worker_id: int):
        try:
            cycle = self.engine().create_salary(worker_id, self.pay_date(request))
        except PayrollError as e:
            return error_response(e)
        return Response(SalaryCycleReadSerializer(cycle).data, status=status.HTTP_201_CREATED)


class SalaryIssueView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Pay (part of) one salary cycle",
        parameters=[path_int("salary_id", "Salary cycle ID")],
        request=IssueSalarySerializer,
        responses={200: SalaryCycleReadSerializer, **std_errors()},
    )
    def post(self, request, salary_id: int):
        ser = IssueSalarySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            cycle = self.engine().issue_salary(
                salary_id, data["amount"],
                proof=data.get("payment_proof") or None,
                signature=data.get("signature") or None,
            )
        except PayrollError as e:
            return error_response(e)
        return Response(SalaryCycleReadSerializer(cycle).data)


class SalaryPayWorkerView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Pay a lump sum, oldest outstanding cycle first",
        description="Leftover after clearing outstanding cycles pays a newly created cycle.",
        parameters=[path_int("worker_id", "Worker ID")],
        request=PayWorkerSerializer,
        responses={200: AllocationSerializer(many=True), **std_errors()},
    )
    def post(self, request, worker_id: int):
        ser = PayWorkerSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            allocations = self.engine().pay_worker(
                worker_id, data["amount"],
                pay_date=data.get("pay_date"),
                proof=data.get("payment_proof") or None,
                signature=data.get("signature") or None,
            )
        except PayrollError as e:
            return error_response(e)
        return Response({"results": AllocationSerializer(allocations, many=True).data})


class PaidPeriodsView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Paid / partially paid periods of a worker (UI locking)",
        parameters=[q_int("worker_id", "Worker ID", required=True)],
        responses={200: PaidPeriodSerializer(many=True), **std_errors()},
    )
    def get(self, request):
        q = WorkerIdQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        worker_id = q.validated_data["worker_id"]
        try:
            periods = self.engine().get_paid_periods(worker_id)
        except PayrollError as e:
            return error_response(e)
        return Response({"worker_id": worker_id, "periods": PaidPeriodSerializer(periods, many=True).data})


class LockStatusView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Is a worker's date locked by a paid cycle?",
        description="scope=record checks the closed window used for attendance/expenses; "
                    "scope=advance checks the window without its last day.",
        parameters=[
            q_int("worker_id", "Worker ID", required=True),
            q_date("date", "Date", required=True),
            q_str("scope", "record | advance"),
        ],
        responses={200: OpenApiResponse(description='{"locked": bool}')},
    )
    def get(self, request):
        q = LockQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        d = q.validated_data
        engine = self.engine()
        if d["scope"] == "advance":
            locked = engine.is_locked_for_advance(d["worker_id"], d["date"])
        else:
            locked = engine.is_locked(d["worker_id"], d["date"])
        return Response({"worker_id": d["worker_id"], "date": d["date"], "scope": d["scope"], "locked": locked})


class PendingSalariesView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="All PENDING / PARTIAL cycles",
        parameters=PAGE_PARAMS,
        responses={200: SalaryCycleReadSerializer(many=True)},
    )
    def get(self, request):
        qs = salary_selector.list_pending_salaries()
        paginator = DefaultPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(SalaryCycleReadSerializer(page, many=True).data)


class WorkerSalariesView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Salary cycles of a worker",
        parameters=[
            path_int("worker_id", "Worker ID"),
            q_date("start_date", "cycle_start >= start_date"),
            q_date("end_date", "cycle_end <= end_date"),
            q_str("status", "PENDING | PARTIAL | PAID"),
            *PAGE_PARAMS,
        ],
        responses={200: SalaryCycleReadSerializer(many=True), **std_errors()},
    )
    def get(self, request, worker_id: int):
        try:
            qs = salary_selector.list_worker_salaries(worker_id, request.query_params)
        except PayrollError as e:
            return error_response(e)
        paginator = DefaultPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(SalaryCycleReadSerializer(page, many=True).data)


class WorkerOutstandingView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Outstanding (PENDING / PARTIAL) cycles of a worker, oldest first",
        parameters=[path_int("worker_id", "Worker ID")],
        responses={200: SalaryCycleReadSerializer(many=True), **std_errors()},
    )
    def get(self, request, worker_id: int):
        try:
            cycles = salary_selector.list_outstanding_salaries(worker_id)
        except PayrollError as e:
            return error_response(e)
        return Response({"results": SalaryCycleReadSerializer(cycles, many=True).data})


class WorkerCarryForwardView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Total still owed across unpaid cycles",
        parameters=[path_int("worker_id", "Worker ID")],
        responses={200: OpenApiResponse(description='{"worker_id": int, "carry_forward": decimal}'), **std_errors()},
    )
    def get(self, request, worker_id: int):
        try:
            salary_selector.list_outstanding_salaries(worker_id)
        except PayrollError as e:
            return error_response(e)
        return Response({"worker_id": worker_id, "carry_forward": self.engine().carry_forward(worker_id)})


class SalaryDetailView(_SalaryAPIView):
    @extend_schema(
        tags=["Salary"],
        summary="Salary cycle with its payments",
        parameters=[path_int("salary_id", "Salary cycle ID")],
        responses={200: SalaryCycleDetailSerializer, **std_errors()},
    )
    def get(self, request, salary_id: int):
        try:
            cycle = salary_selector.get_salary(salary_id)
        except PayrollError as e:
            return error_response(e)
        return Response(SalaryCycleDetailSerializer(cycle).data)

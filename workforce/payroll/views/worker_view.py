# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from django.utils import timezone
from drf_spectacular.utils import extend_schema, extend_schema_view

from payroll.exceptions import PayrollError
from payroll.models import Worker
from payroll.serializers.worker_serializer import (
    WorkerReadSerializer,
    WorkerCreateSerializer,
    WorkerUpdateSerializer,
    WorkerDeactivateSerializer,
    WageHistoryReadSerializer,
    RateQuerySerializer,
)
from payroll.services.worker_service import (
    create_worker as svc_create,
    update_worker as svc_update,
    set_worker_active as svc_set_active,
    get_worker as svc_get,
    list_workers as svc_list,
    get_wage_history as svc_wage_history,
    get_rate_on as svc_rate_on,
)
from payroll.utils.pagination import DefaultPagination
from payroll.views.utils import PAGE_PARAMS, error_response, path_int, q_date, q_str, std_errors


def _active_param(raw):
    if raw is None or raw == "":
        return None
    return str(raw).strip().lower() in ("1", "true", "yes")


@extend_schema_view(
    list=extend_schema(
        tags=["Worker"],
        summary="List workers",
        parameters=[q_str("active", "true | false"), *PAGE_PARAMS],
        responses={200: WorkerReadSerializer(many=True)},
    ),
    retrieve=extend_schema(
        tags=["Worker"],
        summary="Worker by ID",
        parameters=[path_int("id", "Worker ID")],
        responses={200: WorkerReadSerializer, **std_errors()},
    ),
    create=extend_schema(
        tags=["Worker"],
        summary="Register a worker",
        request=WorkerCreateSerializer,
        responses={201: WorkerReadSerializer, **std_errors()},
    ),
    update=extend_schema(
        tags=["Worker"],
        summary="Update a worker",
        description="Rate changes are logged in the wage history with their effective date and may not fall inside a salary cycle. Existing attendance keeps its rate snapshot.",
        parameters=[path_int("id", "Worker ID")],
        request=WorkerUpdateSerializer,
        responses={200: WorkerReadSerializer, **std_errors()},
    ),
    partial_update=extend_schema(
        tags=["Worker"],
        summary="Update a worker (partial)",
        parameters=[path_int("id", "Worker ID")],
        request=WorkerUpdateSerializer,
        responses={200: WorkerReadSerializer, **std_errors()},
    ),
)
class WorkerViewSet(viewsets.GenericViewSet):
    queryset = Worker.objects.all()
    serializer_class = WorkerReadSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = DefaultPagination

    def list(self, request):
        qs = svc_list(_active_param(request.query_params.get("active")))
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(WorkerReadSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            obj = svc_get(int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(WorkerReadSerializer(obj).data)

    def create(self, request):
        ser = WorkerCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_create(**ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(WorkerReadSerializer(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = WorkerUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_update(worker_id=int(pk), **ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(WorkerReadSerializer(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @extend_schema(
        tags=["Worker"],
        summary="Deactivate a worker",
        description=(
            "Without effective_from the worker is inactive at once and new attendance, advances and expenses are refused. "
            "With it, only records dated on or after that day are refused. Salary can still be settled."
        ),
        request=WorkerDeactivateSerializer,
        responses={200: WorkerReadSerializer, **std_errors()},
    )
    @action(detail=True, methods=["post"], url_path="deactivate")
    def deactivate(self, request, pk=None):
        ser = WorkerDeactivateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._set_active(pk, False, ser.validated_data.get("effective_from"))

    @extend_schema(
        tags=["Worker"],
        summary="Reactivate a worker",
        request=None,
        responses={200: WorkerReadSerializer, **std_errors()},
    )
    @action(detail=True, methods=["post"], url_path="activate")
    def activate(self, request, pk=None):
        return self._set_active(pk, True)

    def _set_active(self, pk, is_active: bool, effective_from=None):
        try:
            obj = svc_set_active(worker_id=int(pk), is_active=is_active, effective_from=effective_from)
        except PayrollError as e:
            return error_response(e)
        return Response(WorkerReadSerializer(obj).data)

    @extend_schema(
        tags=["Worker"],
        summary="Wage history of a worker",
        responses={200: WageHistoryReadSerializer(many=True), **std_errors()},
    )
    @action(detail=True, methods=["get"], url_path="wage-history", pagination_class=None)
    def wage_history(self, request, pk=None):
        try:
            rows = svc_wage_history(int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(WageHistoryReadSerializer(rows, many=True).data)

    @extend_schema(
        tags=["Worker"],
        summary="Rates in effect on a date",
        parameters=[q_date("date", "Date (default today)")],
        responses={200: WageHistoryReadSerializer, **std_errors()},
    )
    @action(detail=True, methods=["get"], url_path="rate", pagination_class=None)
    def rate(self, request, pk=None):
        ser = RateQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        try:
            row = svc_rate_on(int(pk), ser.validated_data.get("date") or timezone.localdate())
        except PayrollError as e:
            return error_response(e)
        return Response(WageHistoryReadSerializer(row).data)

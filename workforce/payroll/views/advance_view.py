# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiResponse

from payroll.exceptions import PayrollError
from payroll.models import Advance
from payroll.selectors.advance_selector import worker_advance_total, workers_with_latest_advance
from payroll.selectors.filters import build_record_filter
from payroll.serializers.advance_serializer import (
    AdvanceReadSerializer,
    AdvanceCreateSerializer,
    AdvanceUpdateSerializer,
    AdvanceTotalSerializer,
    WorkerLatestAdvanceSerializer,
)
from payroll.services.advance_service import (
    create_advance as svc_create,
    update_advance as svc_update,
    delete_advance as svc_delete,
    get_advance as svc_get,
    list_advances as svc_list,
)
from payroll.utils.pagination import DefaultPagination
from payroll.views.utils import (
    PAGE_PARAMS, RECORD_FILTER_PARAMS, error_response, path_int, q_date, std_errors,
)


@extend_schema_view(
    list=extend_schema(
        tags=["Advance"],
        summary="List advances",
        parameters=[*RECORD_FILTER_PARAMS, *PAGE_PARAMS],
        responses={200: AdvanceReadSerializer(many=True), **std_errors()},
    ),
    retrieve=extend_schema(
        tags=["Advance"],
        summary="Advance by ID",
        parameters=[path_int("id", "Advance ID")],
        responses={200: AdvanceReadSerializer, **std_errors()},
    ),
    create=extend_schema(
        tags=["Advance"],
        summary="Give an advance",
        description="Allowed on the last day of a paid cycle; rejected on any earlier day of it.",
        request=AdvanceCreateSerializer,
        responses={201: AdvanceReadSerializer, **std_errors()},
    ),
    update=extend_schema(
        tags=["Advance"],
        summary="Update an advance",
        description="Advances already counted in a salary cycle cannot change.",
        parameters=[path_int("id", "Advance ID")],
        request=AdvanceUpdateSerializer,
        responses={200: AdvanceReadSerializer, **std_errors()},
    ),
    partial_update=extend_schema(
        tags=["Advance"],
        summary="Update an advance (partial)",
        parameters=[path_int("id", "Advance ID")],
        request=AdvanceUpdateSerializer,
        responses={200: AdvanceReadSerializer, **std_errors()},
    ),
    destroy=extend_schema(
        tags=["Advance"],
        summary="Delete an advance",
        parameters=[path_int("id", "Advance ID")],
        responses={204: OpenApiResponse(description="Deleted"), **std_errors()},
    ),
)
class AdvanceViewSet(viewsets.GenericViewSet):
    queryset = Advance.objects.all()
    serializer_class = AdvanceReadSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = DefaultPagination

    def list(self, request):
        try:
            qs = svc_list(build_record_filter(request.query_params))
        except PayrollError as e:
            return error_response(e)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(AdvanceReadSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            obj = svc_get(int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(AdvanceReadSerializer(obj).data)

    def create(self, request):
        ser = AdvanceCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_create(**ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(AdvanceReadSerializer(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = AdvanceUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_update(advance_id=int(pk), **ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(AdvanceReadSerializer(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        try:
            svc_delete(advance_id=int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Advance"],
        summary="Total advances of a worker",
        parameters=[
            path_int("worker_id", "Worker ID"),
            q_date("start_date", "From date, inclusive"),
            q_date("end_date", "To date, inclusive"),
        ],
        responses={200: AdvanceTotalSerializer, **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path=r"worker/(?P<worker_id>\d+)/total", pagination_class=None)
    def worker_total(self, request, worker_id=None):
        try:
            data = worker_advance_total(int(worker_id), request.query_params)
        except PayrollError as e:
            return error_response(e)
        return Response(AdvanceTotalSerializer(data).data)

    @extend_schema(
        tags=["Advance"],
        summary="Workers with their latest advance",
        responses={200: WorkerLatestAdvanceSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="workers", pagination_class=None)
    def workers(self, request):
        qs = workers_with_latest_advance()
        return Response(WorkerLatestAdvanceSerializer(qs, many=True).data)

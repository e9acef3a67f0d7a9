# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import viewsets, status, permissions
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiExample, OpenApiResponse

from payroll.exceptions import PayrollError
from payroll.models import AttendanceRecord
from payroll.selectors.filters import build_record_filter
from payroll.serializers.attendance_serializer import (
    AttendanceReadSerializer,
    AttendanceCreateSerializer,
    AttendanceUpdateSerializer,
)
from payroll.services.attendance_service import (
    create_attendance as svc_create,
    update_attendance as svc_update,
    delete_attendance as svc_delete,
    get_attendance as svc_get,
    list_attendance as svc_list,
)
from payroll.utils.pagination import DefaultPagination
from payroll.views.utils import PAGE_PARAMS, RECORD_FILTER_PARAMS, error_response, path_int, std_errors


@extend_schema_view(
    list=extend_schema(
        tags=["Attendance"],
        summary="List attendance records",
        description="`date` wins over `start_date`/`end_date`, which win over `month`.",
        parameters=[*RECORD_FILTER_PARAMS, *PAGE_PARAMS],
        responses={200: AttendanceReadSerializer(many=True), **std_errors()},
    ),
    retrieve=extend_schema(
        tags=["Attendance"],
        summary="Attendance record by ID",
        parameters=[path_int("id", "Attendance ID")],
        responses={200: AttendanceReadSerializer, **std_errors()},
    ),
    create=extend_schema(
        tags=["Attendance"],
        summary="Mark attendance",
        description="Wage and OT rate are copied from the worker at this moment. "
                    "Rejected when a PAID/PARTIAL cycle covers the date.",
        request=AttendanceCreateSerializer,
        responses={201: AttendanceReadSerializer, **std_errors()},
        examples=[
            OpenApiExample(
                "Present with overtime",
                value={"worker_id": 1, "date": "2024-01-15", "status": "PRESENT", "ot_units": "2", "note": ""},
                request_only=True,
            )
        ],
    ),
    update=extend_schema(
        tags=["Attendance"],
        summary="Update attendance",
        parameters=[path_int("id", "Attendance ID")],
        request=AttendanceUpdateSerializer,
        responses={200: AttendanceReadSerializer, **std_errors()},
    ),
    partial_update=extend_schema(
        tags=["Attendance"],
        summary="Update attendance (partial)",
        parameters=[path_int("id", "Attendance ID")],
        request=AttendanceUpdateSerializer,
        responses={200: AttendanceReadSerializer, **std_errors()},
    ),
    destroy=extend_schema(
        tags=["Attendance"],
        summary="Delete attendance",
        parameters=[path_int("id", "Attendance ID")],
        responses={204: OpenApiResponse(description="Deleted"), **std_errors()},
    ),
)
class AttendanceViewSet(viewsets.GenericViewSet):
    queryset = AttendanceRecord.objects.all()
    serializer_class = AttendanceReadSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = DefaultPagination

    def list(self, request):
        try:
            qs = svc_list(build_record_filter(request.query_params))
        except PayrollError as e:
            return error_response(e)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(AttendanceReadSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            obj = svc_get(int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(AttendanceReadSerializer(obj).data)

    def create(self, request):
        ser = AttendanceCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_create(**ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(AttendanceReadSerializer(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = AttendanceUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_update(attendance_id=int(pk), **ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(AttendanceReadSerializer(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        try:
            svc_delete(attendance_id=int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

# -*- coding: utf-8 -*-
from __future__ import annotations
from decimal import Decimal
from rest_framework import serializers
from payroll.models import AttendanceRecord


class AttendanceReadSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source="worker.name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = [
            "id",
            "worker",
            "worker_name",
            "date",
            "status",
            "status_display",
            "ot_units",
            "note",
            "wage_at_time",
            "ot_rate_at_time",
            "created_at",
            "updated_at",
        ]


class AttendanceCreateSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices)
    ot_units = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0"))
    note = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class AttendanceUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices, required=False)
    ot_units = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal("0"), required=False)
    note = serializers.CharField(required=False, allow_blank=True, max_length=500)

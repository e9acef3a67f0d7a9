# -*- coding: utf-8 -*-
from __future__ import annotations
from decimal import Decimal
from rest_framework import serializers
from payroll.models import SalaryCycle, SalaryPayment

MONEY = dict(max_digits=12, decimal_places=2)


class SalaryPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalaryPayment
        fields = ["id", "salary", "amount", "date", "proof"]


class SalaryCycleReadSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source="worker.name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    remaining = serializers.DecimalField(read_only=True, **MONEY)

    class Meta:
        model = SalaryCycle
        fields = [
            "id",
            "worker",
            "worker_name",
            "cycle_start",
            "cycle_end",
            "base_pay",
            "ot_pay",
            "gross_pay",
            "total_advance",
            "total_expense",
            "unpaid_balance",
            "net_pay",
            "total_paid",
            "remaining",
            "status",
            "status_display",
            "issued_at",
            "payment_proof",
            "signature",
            "created_at",
            "updated_at",
        ]


class SalaryCycleDetailSerializer(SalaryCycleReadSerializer):
    payments = SalaryPaymentSerializer(many=True, read_only=True)

    class Meta(SalaryCycleReadSerializer.Meta):
        fields = SalaryCycleReadSerializer.Meta.fields + ["payments"]


class BreakdownSerializer(serializers.Serializer):
    cycle_start = serializers.DateField()
    cycle_end = serializers.DateField()
    total_days = serializers.DecimalField(max_digits=8, decimal_places=1)
    total_ot_units = serializers.DecimalField(max_digits=8, decimal_places=2)
    base_pay = serializers.DecimalField(**MONEY)
    ot_pay = serializers.DecimalField(**MONEY)
    gross_pay = serializers.DecimalField(**MONEY)
    total_advance = serializers.DecimalField(**MONEY)
    total_expense = serializers.DecimalField(**MONEY)
    opening_balance = serializers.DecimalField(**MONEY)
    net_pay = serializers.DecimalField(**MONEY)
    unpaid_balance = serializers.DecimalField(**MONEY)
    total_net_payable = serializers.DecimalField(**MONEY)
    is_first_cycle = serializers.BooleanField()


class PaidPeriodSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    start = serializers.DateField()
    end = serializers.DateField()
    status = serializers.CharField()
    paid_amount = serializers.DecimalField(**MONEY)
    remaining_amount = serializers.DecimalField(**MONEY)


class AllocationSerializer(serializers.Serializer):
    amount = serializers.DecimalField(**MONEY)
    salary = SalaryCycleReadSerializer()


# ===== Writes / query params =====
class PayDateQuerySerializer(serializers.Serializer):
    pay_date = serializers.DateField(required=False, allow_null=True)


class IssueSalarySerializer(serializers.Serializer):
    amount = serializers.DecimalField(min_value=Decimal("0.01"), **MONEY)
    payment_proof = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    signature = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PayWorkerSerializer(IssueSalarySerializer):
    pay_date = serializers.DateField(required=False, allow_null=True)


class LockQuerySerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    date = serializers.DateField()
    scope = serializers.ChoiceField(choices=["record", "advance"], required=False, default="record")


class WorkerIdQuerySerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()

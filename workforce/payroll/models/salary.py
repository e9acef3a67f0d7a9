from decimal import Decimal
from django.db import models
from django.db.models import Q, F, CheckConstraint
from django.utils import timezone
from .mixins import TimeStampedModel

ZERO = Decimal("0.00")


class SalaryCycle(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        PARTIAL = "PARTIAL", "Partially paid"
        PAID = "PAID", "Paid"

    worker = models.ForeignKey("payroll.Worker", on_delete=models.PROTECT, related_name="salaries")
    cycle_start = models.DateField()
    cycle_end = models.DateField(db_index=True)

    base_pay = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    ot_pay = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    gross_pay = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_advance = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_expense = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    unpaid_balance = models.DecimalField(
        max_digits=12, decimal_places=2, default=ZERO,
        help_text="Carry-forward owed from earlier cycles when this one was created.",
    )
    net_pay = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_paid = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)

    status = models.CharField(max_length=8, choices=Status.choices, default=Status.PENDING, db_index=True)
    issued_at = models.DateTimeField(null=True, blank=True)
    payment_proof = models.TextField(null=True, blank=True)
    signature = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "SalaryCycle"
        ordering = ["-cycle_end"]
        constraints = [
            CheckConstraint(name="salary_cycle_end_gte_start", condition=Q(cycle_end__gte=F("cycle_start"))),
            CheckConstraint(name="salary_total_paid_lte_net", condition=Q(total_paid__lte=F("net_pay"))),
            CheckConstraint(name="salary_net_pay_non_negative", condition=Q(net_pay__gte=0)),
            models.UniqueConstraint(fields=["worker", "cycle_start"], name="uniq_salary_worker_cycle_start"),
        ]
        indexes = [
            models.Index(fields=["worker", "cycle_end"]),
            models.Index(fields=["worker", "status"]),
        ]

    @property
    def remaining(self) -> Decimal:
        return self.net_pay - self.total_paid

    def __str__(self):
        return f"SAL {self.worker_id} {self.cycle_start}→{self.cycle_end} [{self.status}]"


class SalaryPayment(models.Model):
    salary = models.ForeignKey(SalaryCycle, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateTimeField(default=timezone.now)
    proof = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "SalaryPayment"
        ordering = ["date", "id"]

    def __str__(self):
        return f"PAY {self.salary_id} {self.amount}"

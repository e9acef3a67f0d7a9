from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from .mixins import TimeStampedModel


class ExpenseType(models.Model):
    name = models.CharField(max_length=60, unique=True)

    class Meta:
        db_table = "ExpenseType"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Expense(TimeStampedModel):
    worker = models.ForeignKey("payroll.Worker", on_delete=models.CASCADE, related_name="expenses")
    type = models.ForeignKey(ExpenseType, on_delete=models.PROTECT, related_name="expenses")
    date = models.DateField(db_index=True)
    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    note = models.CharField(max_length=500, blank=True, default="")

    class Meta:
        db_table = "Expense"
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["worker", "date"]),
        ]

    def __str__(self):
        return f"EXP {self.worker_id} {self.date} {self.amount}"

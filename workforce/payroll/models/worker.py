from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from .mixins import TimeStampedModel


class Worker(TimeStampedModel):
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=10, blank=True, default="")
    wage = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current daily wage. Attendance snapshots it at creation.",
    )
    ot_rate = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current pay per overtime unit.",
    )
    joined_at = models.DateField(default=timezone.localdate)
    opening_balance = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"),
        help_text="Signed amount folded into the worker's first salary cycle only.",
    )
    balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"),
        help_text="Running total of salary paid out.",
    )
    is_active = models.BooleanField(default=True)
    inactive_from = models.DateField(
        null=True, blank=True,
        help_text="Scheduled inactivation. No new records dated on or after it.",
    )

    class Meta:
        db_table = "Worker"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"
